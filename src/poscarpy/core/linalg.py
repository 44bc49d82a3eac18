"""Small fixed-size linear algebra used for lattice and coordinate conversions.

Matrices are row-major ``(3, 3)`` arrays whose rows are vectors, and all
products are of the row-vector-times-matrix form ``v @ m``.
"""

from __future__ import annotations

import numpy as np


Array = np.ndarray


def cross3(a: Array, b: Array) -> Array:
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return np.array(
        [
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ],
        dtype=float,
    )


def dot3(a: Array, b: Array) -> float:
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def det33(m: Array) -> float:
    """Determinant as the scalar triple product of the rows."""

    m = np.asarray(m, dtype=float)
    return dot3(cross3(m[0], m[1]), m[2])


def inv33(m: Array) -> Array:
    """Inverse via the adjugate.

    A singular matrix is not guarded against; the result is then full of
    ``inf``/``nan``.
    """

    m = np.asarray(m, dtype=float)
    cof = np.empty((3, 3), dtype=float)
    for r in range(3):
        for c in range(3):
            cof[r, c] = (
                m[(r + 1) % 3, (c + 1) % 3] * m[(r + 2) % 3, (c + 2) % 3]
                - m[(r + 1) % 3, (c + 2) % 3] * m[(r + 2) % 3, (c + 1) % 3]
            )
    # numpy scalar: a zero determinant yields inf/nan, not ZeroDivisionError
    det = np.float64(dot3(m[0], cof[0]))
    with np.errstate(divide="ignore", invalid="ignore"):
        return cof.T * (np.float64(1.0) / det)


def mul3_33(v: Array, m: Array) -> Array:
    """Row vector times matrix."""

    return np.asarray(v, dtype=float) @ np.asarray(m, dtype=float)


def muln3_33(vs: Array, m: Array) -> Array:
    """Batched :func:`mul3_33` over an ``(N, 3)`` array."""

    return np.asarray(vs, dtype=float).reshape(-1, 3) @ np.asarray(m, dtype=float)


def scale33(m: Array, factor: float) -> Array:
    return np.asarray(m, dtype=float) * float(factor)


def scalen3(vs: Array, factor: float) -> Array:
    return np.asarray(vs, dtype=float).reshape(-1, 3) * float(factor)
