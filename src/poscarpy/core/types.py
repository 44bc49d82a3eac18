"""Core data structures for POSCAR structures."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

import numpy as np


Array = np.ndarray


class CoordsTag(Enum):
    """Interpretation of a block of 3-vectors."""

    CART = "cart"
    FRAC = "frac"


class ScaleKind(Enum):
    FACTOR = "factor"
    VOLUME = "volume"


@dataclass(frozen=True)
class ScaleLine:
    """The second line of a POSCAR.

    A positive literal on the scale line is a uniform ``FACTOR`` applied to the
    lattice vectors; a negative literal is a target cell ``VOLUME`` whose
    magnitude is stored here.
    """

    kind: ScaleKind
    value: float

    @classmethod
    def factor(cls, value: float) -> ScaleLine:
        return cls(ScaleKind.FACTOR, float(value))

    @classmethod
    def volume(cls, value: float) -> ScaleLine:
        return cls(ScaleKind.VOLUME, float(value))

    @property
    def is_volume(self) -> bool:
        return self.kind is ScaleKind.VOLUME


def _as_n3(data, dtype) -> Array:
    arr = np.array(data, dtype=dtype)
    if arr.size == 0:
        return arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Expected an (N, 3) array, got shape {arr.shape}.")
    return arr


@dataclass(eq=False)
class Coords:
    """A block of 3-vectors tagged as Cartesian or fractional."""

    tag: CoordsTag
    data: Array

    def __post_init__(self) -> None:
        self.data = _as_n3(self.data, float)

    @classmethod
    def cart(cls, data) -> Coords:
        return cls(CoordsTag.CART, data)

    @classmethod
    def frac(cls, data) -> Coords:
        return cls(CoordsTag.FRAC, data)

    @classmethod
    def zeros(cls, tag: CoordsTag, n: int) -> Coords:
        return cls(tag, np.zeros((n, 3), dtype=float))

    @property
    def is_cart(self) -> bool:
        return self.tag is CoordsTag.CART

    @property
    def is_frac(self) -> bool:
        return self.tag is CoordsTag.FRAC

    def map(self, func: Callable[[Array], Array]) -> Coords:
        return Coords(self.tag, func(self.data))

    def __len__(self) -> int:
        return int(self.data.shape[0])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coords):
            return NotImplemented
        return self.tag is other.tag and np.array_equal(self.data, other.data)

    def __repr__(self) -> str:
        return f"Coords.{self.tag.value}({self.data.tolist()!r})"


@dataclass(eq=False)
class RawPoscar:
    """Unvalidated POSCAR contents, one field per section of the file.

    The scale line is kept as written rather than folded into the lattice.
    Nothing is checked on construction; call :meth:`validate` to obtain a
    printable :class:`~poscarpy.core.poscar.Poscar`.
    """

    comment: str
    scale: ScaleLine
    lattice_vectors: Array
    group_counts: list[int]
    positions: Coords
    group_symbols: list[str] | None = None
    velocities: Coords | None = None
    dynamics: Array | None = None

    def __post_init__(self) -> None:
        self.lattice_vectors = np.array(self.lattice_vectors, dtype=float)
        self.group_counts = [int(c) for c in self.group_counts]
        if self.group_symbols is not None:
            self.group_symbols = [str(s) for s in self.group_symbols]
        if self.dynamics is not None:
            self.dynamics = _as_n3(self.dynamics, bool)

    def validate(self):
        """Check all invariants and return a validated ``Poscar``.

        Raises :class:`~poscarpy.modeling.validators.ValidationError` on the
        first broken invariant. ``self`` is left untouched either way.
        """

        from poscarpy.modeling.validators import validate_raw_poscar

        return validate_raw_poscar(self)

    def copy(self) -> RawPoscar:
        return copy.deepcopy(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawPoscar):
            return NotImplemented
        return (
            self.comment == other.comment
            and self.scale == other.scale
            and np.array_equal(np.asarray(self.lattice_vectors), np.asarray(other.lattice_vectors))
            and _optional_list_eq(self.group_symbols, other.group_symbols)
            and list(self.group_counts) == list(other.group_counts)
            and self.positions == other.positions
            and self.velocities == other.velocities
            and _optional_array_eq(self.dynamics, other.dynamics)
        )


def _optional_list_eq(a: Sequence | None, b: Sequence | None) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return list(a) == list(b)


def _optional_array_eq(a: Array | None, b: Array | None) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return np.array_equal(np.asarray(a), np.asarray(b))
