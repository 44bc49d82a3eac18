"""Validated POSCAR structure and its derived, computed-on-demand views."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Iterator

import numpy as np

from .linalg import det33, inv33, muln3_33, scale33, scalen3
from .types import Coords, CoordsTag, RawPoscar, ScaleKind, ScaleLine


Array = np.ndarray

_CONSTRUCTION_KEY = object()


@dataclass(frozen=True)
class Group:
    """One contiguous run of sites sharing a symbols/counts entry."""

    label: str
    symbol: str | None
    count: int


class Poscar:
    """A POSCAR whose invariants are known to hold.

    Instances are only produced by :meth:`RawPoscar.validate`, which makes
    every ``Poscar`` safe to print and reparse. Use :meth:`into_raw` to get an
    editable copy back.

    Nothing derived is stored: lattice scaling and coordinate conversions are
    recomputed on every call.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: RawPoscar, *, _key: object = None) -> None:
        if _key is not _CONSTRUCTION_KEY:
            raise TypeError("Poscar objects can only be created with RawPoscar.validate().")
        self._raw = raw

    @classmethod
    def _from_validated(cls, raw: RawPoscar) -> Poscar:
        return cls(raw, _key=_CONSTRUCTION_KEY)

    def into_raw(self) -> RawPoscar:
        """Independent, editable copy of the underlying data."""

        return copy.deepcopy(self._raw)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Poscar):
            return NotImplemented
        return self._raw == other._raw

    __hash__ = None

    def __repr__(self) -> str:
        return f"Poscar({self._raw!r})"

    def __str__(self) -> str:
        from poscarpy.io.writer import format_poscar

        return format_poscar(self)

    def __format__(self, spec: str) -> str:
        from poscarpy.io.writer import FloatFormat, format_poscar

        return format_poscar(self, FloatFormat.from_spec(spec))

    # --- fields as written ---

    @property
    def comment(self) -> str:
        return self._raw.comment

    @property
    def scale(self) -> ScaleLine:
        return self._raw.scale

    @property
    def num_sites(self) -> int:
        return sum(self._raw.group_counts)

    @property
    def group_counts(self) -> tuple[int, ...]:
        return tuple(self._raw.group_counts)

    @property
    def group_symbols(self) -> tuple[str, ...] | None:
        if self._raw.group_symbols is None:
            return None
        return tuple(self._raw.group_symbols)

    @property
    def dynamics(self) -> Array | None:
        if self._raw.dynamics is None:
            return None
        return np.array(self._raw.dynamics, dtype=bool)

    @property
    def raw_positions(self) -> Coords:
        return copy.deepcopy(self._raw.positions)

    @property
    def raw_velocities(self) -> Coords | None:
        return copy.deepcopy(self._raw.velocities)

    @property
    def unscaled_lattice_vectors(self) -> Array:
        return np.array(self._raw.lattice_vectors, dtype=float)

    # --- groups and per-site data ---

    def groups(self) -> Iterator[Group]:
        symbols = self._raw.group_symbols
        for i, count in enumerate(self._raw.group_counts):
            symbol = None if symbols is None else symbols[i]
            label = symbol if symbol is not None else f"X{i + 1}"
            yield Group(label=label, symbol=symbol, count=count)

    def site_symbols(self) -> list[str] | None:
        """Per-site symbols, or ``None`` when the file has no symbols line."""

        if self._raw.group_symbols is None:
            return None
        return [g.symbol for g in self.groups() for _ in range(g.count)]

    def site_labels(self) -> list[str]:
        return [g.label for g in self.groups() for _ in range(g.count)]

    # --- lattice ---

    @property
    def lattice_determinant(self) -> float:
        """Determinant of the lattice rows as written (scale not applied)."""

        return det33(self._raw.lattice_vectors)

    @property
    def effective_scale_factor(self) -> float:
        scale = self._raw.scale
        if scale.kind is ScaleKind.FACTOR:
            return scale.value
        # a degenerate lattice gives inf
        with np.errstate(divide="ignore"):
            return float((np.float64(scale.value) / abs(np.float64(self.lattice_determinant))) ** (1.0 / 3.0))

    @property
    def scaled_volume(self) -> float:
        scale = self._raw.scale
        if scale.kind is ScaleKind.VOLUME:
            return scale.value
        return abs(self.lattice_determinant) * scale.value**3

    @property
    def scaled_lattice_vectors(self) -> Array:
        return scale33(self._raw.lattice_vectors, self.effective_scale_factor)

    # --- positions ---

    @property
    def unscaled_cart_positions(self) -> Array:
        positions = self._raw.positions
        if positions.is_cart:
            return positions.data.copy()
        return muln3_33(positions.data, self._raw.lattice_vectors)

    @property
    def scaled_cart_positions(self) -> Array:
        positions = self._raw.positions
        if positions.is_cart:
            return scalen3(positions.data, self.effective_scale_factor)
        return muln3_33(positions.data, self.scaled_lattice_vectors)

    @property
    def frac_positions(self) -> Array:
        positions = self._raw.positions
        if positions.is_frac:
            return positions.data.copy()
        # the scale factor cancels between cartesian data and lattice
        return muln3_33(positions.data, inv33(self._raw.lattice_vectors))

    # --- velocities ---
    # Cartesian velocities live in the basis of the unscaled lattice.

    @property
    def cart_velocities(self) -> Array | None:
        velocities = self._raw.velocities
        if velocities is None:
            return None
        if velocities.is_cart:
            return velocities.data.copy()
        return muln3_33(velocities.data, self._raw.lattice_vectors)

    @property
    def frac_velocities(self) -> Array | None:
        velocities = self._raw.velocities
        if velocities is None:
            return None
        if velocities.is_frac:
            return velocities.data.copy()
        return muln3_33(velocities.data, inv33(self._raw.lattice_vectors))

    # --- representation changes ---

    def _with(self, **changes) -> Poscar:
        raw = self.into_raw()
        for name, value in changes.items():
            setattr(raw, name, value)
        return Poscar._from_validated(raw)

    def with_cart_positions(self) -> Poscar:
        """Copy storing positions as (unscaled) Cartesian coordinates."""

        return self._with(positions=Coords(CoordsTag.CART, self.unscaled_cart_positions))

    def with_frac_positions(self) -> Poscar:
        return self._with(positions=Coords(CoordsTag.FRAC, self.frac_positions))

    def with_cart_velocities(self) -> Poscar:
        if self._raw.velocities is None:
            return self._with()
        return self._with(velocities=Coords(CoordsTag.CART, self.cart_velocities))

    def with_frac_velocities(self) -> Poscar:
        if self._raw.velocities is None:
            return self._with()
        return self._with(velocities=Coords(CoordsTag.FRAC, self.frac_velocities))
