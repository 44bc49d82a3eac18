import numpy as np

from poscarpy.core.linalg import cross3, det33, dot3, inv33, mul3_33, muln3_33, scale33, scalen3


# Unimodular, so the inverse is exactly representable.
UNIMODULAR = np.array(
    [
        [2.0, -1.0, 2.0],
        [-1.0, 3.0, -3.0],
        [1.0, 1.0, 0.0],
    ]
)
UNIMODULAR_INV = np.array(
    [
        [3.0, 2.0, -3.0],
        [-3.0, -2.0, 4.0],
        [-4.0, -3.0, 5.0],
    ]
)


def test_cross_and_dot() -> None:
    x = [1.0, 0.0, 0.0]
    y = [0.0, 1.0, 0.0]
    assert np.array_equal(cross3(x, y), [0.0, 0.0, 1.0])
    assert np.array_equal(cross3(y, x), [0.0, 0.0, -1.0])
    assert dot3([1.0, 2.0, 3.0], [4.0, 5.0, 6.0]) == 32.0


def test_det_is_exact_for_integer_matrices() -> None:
    assert det33(UNIMODULAR) == 1.0
    assert det33(np.diag([2.0, 3.0, 4.0])) == 24.0
    assert det33(scale33(UNIMODULAR, -2.0)) == -8.0


def test_inverse_exact() -> None:
    assert np.array_equal(inv33(UNIMODULAR), UNIMODULAR_INV)
    # determinant other than 1
    assert np.array_equal(inv33(scale33(UNIMODULAR, -2.0)), scale33(UNIMODULAR_INV, -0.5))


def test_inverse_of_singular_matrix_is_not_finite() -> None:
    out = inv33(np.zeros((3, 3)))
    assert not np.all(np.isfinite(out))


def test_inverse_matches_numpy_for_general_matrix() -> None:
    m = np.array([[3.1, 0.2, -0.4], [0.0, 2.9, 0.7], [0.3, -0.1, 4.2]])
    assert np.allclose(inv33(m), np.linalg.inv(m), rtol=1e-13, atol=1e-15)
    assert np.allclose(muln3_33(m, inv33(m)), np.eye(3), atol=1e-14)


def test_mul_n3_33() -> None:
    vs = np.array(
        [
            [1.0, 1.0, 5.0],
            [0.0, 1.0, 5.0],
            [1.0, 5.0, 2.0],
            [2.0, 2.0, 0.0],
        ]
    )
    m = np.array(
        [
            [5.0, 5.0, 5.0],
            [2.0, 1.0, 5.0],
            [6.0, 4.0, 5.0],
        ]
    )
    prod = np.array(
        [
            [37.0, 26.0, 35.0],
            [32.0, 21.0, 30.0],
            [27.0, 18.0, 40.0],
            [14.0, 12.0, 20.0],
        ]
    )
    assert np.array_equal(muln3_33(vs, m), prod)
    assert np.array_equal(mul3_33(vs[2], m), prod[2])
    assert muln3_33(np.zeros((0, 3)), m).shape == (0, 3)


def test_scaling_does_not_modify_input() -> None:
    vs = np.array([[1.0, 2.0, 3.0]])
    out = scalen3(vs, 2.0)
    assert np.array_equal(out, [[2.0, 4.0, 6.0]])
    assert np.array_equal(vs, [[1.0, 2.0, 3.0]])
    m = np.eye(3)
    assert np.array_equal(scale33(m, 3.0), 3.0 * np.eye(3))
    assert np.array_equal(m, np.eye(3))
