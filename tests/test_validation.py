import numpy as np
import pytest

from poscarpy import Coords, Poscar, RawPoscar, ScaleLine, ValidationError, ValidationErrorKind, parse_poscar


def boring_poscar() -> RawPoscar:
    return RawPoscar(
        comment="comment",
        scale=ScaleLine.factor(1.0),
        lattice_vectors=np.eye(3),
        group_counts=[1],
        positions=Coords.frac([[0.0, 0.0, 0.0]]),
    )


def _kind(raw: RawPoscar) -> ValidationErrorKind:
    with pytest.raises(ValidationError) as info:
        raw.validate()
    return info.value.kind


@pytest.mark.parametrize("comment", ["lol\rrite", "lol\nrite"])
def test_comment_newline(comment: str) -> None:
    raw = boring_poscar()
    raw.comment = comment
    assert _kind(raw) is ValidationErrorKind.NEWLINE_IN_COMMENT


@pytest.mark.parametrize(
    "scale",
    [
        ScaleLine.factor(0.0),
        ScaleLine.volume(0.0),
        ScaleLine.factor(-1.0),
        ScaleLine.volume(-1.0),
        ScaleLine.factor(float("nan")),
    ],
)
def test_bad_scale(scale: ScaleLine) -> None:
    raw = boring_poscar()
    raw.scale = scale
    assert _kind(raw) is ValidationErrorKind.BAD_SCALE_LINE


@pytest.mark.parametrize("scale", [ScaleLine.factor(1e-300), ScaleLine.volume(2.5)])
def test_positive_scale(scale: ScaleLine) -> None:
    raw = boring_poscar()
    raw.scale = scale
    assert raw.validate().scale == scale


@pytest.mark.parametrize("counts", [[], [0, 0]])
def test_no_atoms(counts: list[int]) -> None:
    raw = boring_poscar()
    raw.positions = Coords.frac([])
    raw.group_counts = counts
    assert _kind(raw) is ValidationErrorKind.NO_ATOMS


def test_negative_count() -> None:
    raw = boring_poscar()
    raw.group_counts = [2, -1]
    assert _kind(raw) is ValidationErrorKind.NEGATIVE_GROUP_COUNT


@pytest.mark.parametrize("symbols", [["C"], ["C", "C", "C"]])
def test_inconsistent_num_groups(symbols: list[str]) -> None:
    raw = boring_poscar()
    raw.group_counts = [2, 1]
    raw.positions = Coords.frac(np.zeros((3, 3)))
    raw.group_symbols = symbols
    assert _kind(raw) is ValidationErrorKind.INCONSISTENT_NUM_GROUPS


def test_num_groups_checked_before_comment() -> None:
    raw = boring_poscar()
    raw.comment = "two\nlines"
    raw.group_symbols = ["A", "B"]
    assert _kind(raw) is ValidationErrorKind.INCONSISTENT_NUM_GROUPS


@pytest.mark.parametrize("symbol", ["", "C N", "C\t", "1N", "9", "　X"])
def test_invalid_symbols(symbol: str) -> None:
    raw = boring_poscar()
    raw.group_symbols = [symbol]
    with pytest.raises(ValidationError) as info:
        raw.validate()
    assert info.value.kind is ValidationErrorKind.INVALID_SYMBOL
    assert info.value.symbol == symbol


@pytest.mark.parametrize("symbols", [["C"], ["Si"], ["Fe_pv"], ["+1"], ["X.2"], ["Ü"]])
def test_valid_symbols(symbols: list[str]) -> None:
    raw = boring_poscar()
    raw.group_symbols = symbols
    poscar = raw.validate()
    symbols_line = str(poscar).split("\n")[5]
    assert symbols_line.split() == symbols


def test_wrong_lengths_name_the_field() -> None:
    raw = boring_poscar()
    raw.group_counts = [2, 1]
    raw.positions = Coords.frac(np.zeros((2, 3)))
    with pytest.raises(ValidationError) as info:
        raw.validate()
    err = info.value
    assert (err.kind, err.field, err.expected) == (ValidationErrorKind.WRONG_LENGTH, "positions", 3)
    assert str(err) == "member 'positions' is wrong length (should be 3)"

    raw.positions = Coords.frac(np.zeros((3, 3)))
    assert raw.validate().num_sites == 3

    bad = raw.copy()
    bad.dynamics = np.ones((2, 3), dtype=bool)
    with pytest.raises(ValidationError) as info:
        bad.validate()
    assert info.value.field == "dynamics"

    bad = raw.copy()
    bad.velocities = Coords.frac(np.zeros((4, 3)))
    with pytest.raises(ValidationError) as info:
        bad.validate()
    assert info.value.field == "velocities"


@pytest.mark.parametrize("counts", [[1], [3], [1, 2], [0, 4, 1]])
def test_matching_lengths_validate(counts: list[int]) -> None:
    n = sum(counts)
    raw = boring_poscar()
    raw.group_counts = counts
    raw.positions = Coords.cart(np.zeros((n, 3)))
    raw.velocities = Coords.frac(np.zeros((n, 3)))
    raw.dynamics = np.zeros((n, 3), dtype=bool)
    assert raw.validate().num_sites == n


def test_failed_validation_leaves_raw_usable() -> None:
    raw = boring_poscar()
    raw.group_counts = [2]
    with pytest.raises(ValidationError):
        raw.validate()
    raw.group_counts = [1]
    assert raw.validate().group_counts == (1,)


def test_validated_data_is_independent_of_raw() -> None:
    raw = boring_poscar()
    poscar = raw.validate()
    raw.comment = "changed"
    raw.positions.data[0, 0] = 0.5
    assert poscar.comment == "comment"
    assert poscar.frac_positions[0, 0] == 0.0

    back = poscar.into_raw()
    back.lattice_vectors[0, 0] = 9.0
    assert poscar.unscaled_lattice_vectors[0, 0] == 1.0


def test_poscar_cannot_be_constructed_directly() -> None:
    with pytest.raises(TypeError):
        Poscar(boring_poscar())


def test_reshaped_positions_fail_validation() -> None:
    raw = boring_poscar()
    raw.positions.data = np.zeros((1, 2))
    with pytest.raises(ValidationError) as info:
        raw.validate()
    assert (info.value.kind, info.value.field, info.value.expected) == (ValidationErrorKind.WRONG_LENGTH, "positions", 1)


def test_reshaped_velocities_fail_validation() -> None:
    raw = boring_poscar()
    raw.velocities = Coords.cart([[0.0, 0.0, 0.0]])
    raw.velocities.data = np.zeros((1, 4))
    with pytest.raises(ValidationError) as info:
        raw.validate()
    assert info.value.field == "velocities"


def test_flat_dynamics_fail_validation() -> None:
    raw = boring_poscar()
    raw.dynamics = np.array([True, False, True])
    with pytest.raises(ValidationError) as info:
        raw.validate()
    assert (info.value.kind, info.value.field) == (ValidationErrorKind.WRONG_LENGTH, "dynamics")


def test_list_positions_assigned_after_construction_are_normalized() -> None:
    raw = boring_poscar()
    raw.positions.data = [[0.5, 0.25, 0.0]]
    raw.dynamics = [[True, False, True]]
    poscar = raw.validate()
    assert np.array_equal(parse_poscar(str(poscar)).frac_positions, [[0.5, 0.25, 0.0]])
    assert poscar.dynamics.dtype == bool
