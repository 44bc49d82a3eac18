"""Invariant checks gating a ``RawPoscar`` into a printable ``Poscar``."""

from __future__ import annotations

from enum import Enum

import numpy as np

from poscarpy.core.poscar import Poscar
from poscarpy.core.types import Coords, RawPoscar
from poscarpy.io.scanner import split_words


class ValidationErrorKind(Enum):
    NEWLINE_IN_COMMENT = "the comment may not contain a newline"
    INVALID_SYMBOL = "invalid symbol"
    NEGATIVE_GROUP_COUNT = "group counts may not be negative"
    NO_ATOMS = "at least one atom is required"
    BAD_SCALE_LINE = "the value inside Factor(x) or Volume(x) must be positive"
    INCONSISTENT_NUM_GROUPS = "inconsistent number of atom types"
    WRONG_LENGTH = "member has the wrong length"


class ValidationError(ValueError):
    """The first invariant that a ``RawPoscar`` failed to uphold."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        *,
        field: str | None = None,
        expected: int | None = None,
        symbol: str | None = None,
    ) -> None:
        self.kind = kind
        self.field = field
        self.expected = expected
        self.symbol = symbol
        super().__init__(self._message())

    def _message(self) -> str:
        if self.kind is ValidationErrorKind.WRONG_LENGTH:
            return f"member '{self.field}' is wrong length (should be {self.expected})"
        if self.kind is ValidationErrorKind.INVALID_SYMBOL and self.symbol is not None:
            return f"invalid symbol: {self.symbol!r}"
        return self.kind.value


def _symbol_is_legal(sym: str) -> bool:
    if not sym:
        return False
    if any(ch.isspace() for ch in sym):
        return False
    return not ("0" <= sym[0] <= "9")


def validate_raw_poscar(raw: RawPoscar) -> Poscar:
    """Check invariants in a fixed order and wrap a private copy of ``raw``.

    Only the first violation is reported. ``raw`` itself is never modified,
    so a caller may repair it and try again.
    """

    counts = [int(c) for c in raw.group_counts]
    symbols = raw.group_symbols

    if symbols is not None and len(symbols) != len(counts):
        raise ValidationError(ValidationErrorKind.INCONSISTENT_NUM_GROUPS)

    if "\n" in raw.comment or "\r" in raw.comment:
        raise ValidationError(ValidationErrorKind.NEWLINE_IN_COMMENT)

    # NaN fails this comparison too
    if not raw.scale.value > 0.0:
        raise ValidationError(ValidationErrorKind.BAD_SCALE_LINE)

    if any(c < 0 for c in counts):
        raise ValidationError(ValidationErrorKind.NEGATIVE_GROUP_COUNT)
    n = sum(counts)
    if n == 0:
        raise ValidationError(ValidationErrorKind.NO_ATOMS)

    if symbols is not None:
        for sym in symbols:
            if not _symbol_is_legal(sym):
                raise ValidationError(ValidationErrorKind.INVALID_SYMBOL, symbol=sym)
        if split_words(" ".join(symbols)) != list(symbols):
            raise ValidationError(ValidationErrorKind.INVALID_SYMBOL)

    if np.shape(raw.positions.data) != (n, 3):
        raise ValidationError(ValidationErrorKind.WRONG_LENGTH, field="positions", expected=n)

    if raw.velocities is not None and np.shape(raw.velocities.data) != (n, 3):
        raise ValidationError(ValidationErrorKind.WRONG_LENGTH, field="velocities", expected=n)

    if raw.dynamics is not None and np.shape(raw.dynamics) != (n, 3):
        raise ValidationError(ValidationErrorKind.WRONG_LENGTH, field="dynamics", expected=n)

    lattice = np.asarray(raw.lattice_vectors, dtype=float)
    if lattice.shape != (3, 3):
        raise ValueError(f"lattice_vectors must have shape (3, 3), got {lattice.shape}.")

    # rebuild so that the wrapped data is private and normalized to arrays
    checked = RawPoscar(
        comment=raw.comment,
        scale=raw.scale,
        lattice_vectors=lattice.copy(),
        group_symbols=None if symbols is None else list(symbols),
        group_counts=counts,
        positions=Coords(raw.positions.tag, np.array(raw.positions.data, dtype=float)),
        velocities=(
            None if raw.velocities is None else Coords(raw.velocities.tag, np.array(raw.velocities.data, dtype=float))
        ),
        dynamics=None if raw.dynamics is None else np.array(raw.dynamics, dtype=bool),
    )
    return Poscar._from_validated(checked)
