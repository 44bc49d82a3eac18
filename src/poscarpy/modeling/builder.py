"""Fluent assembly of POSCAR structures from in-memory arrays."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable

import numpy as np

from poscarpy.core.poscar import Poscar
from poscarpy.core.types import Coords, CoordsTag, RawPoscar, ScaleLine


_ALREADY_CONSUMED_MSG = (
    "Attempted to use a Builder that has already been consumed! "
    "Call copy() before building if you need to build it twice."
)


@dataclass
class _BuilderData:
    comment: str = "POSCAR File"
    scale: ScaleLine = field(default_factory=lambda: ScaleLine.factor(1.0))
    lattice_vectors: np.ndarray | None = None
    group_symbols: list[str] | None = None
    # None means one group holding every position
    group_counts: list[int] | None = None
    positions: Coords | CoordsTag | None = None
    velocities: Coords | CoordsTag | None = None
    dynamics: np.ndarray | None = None


class Builder:
    """Chained setters over a ``RawPoscar`` under construction.

    A ``CoordsTag`` given through ``zero_positions``/``zero_velocities`` means
    "all zeros, as many as there are sites". No validation happens here;
    :meth:`build` defers to :meth:`RawPoscar.validate`.

    Example::

        poscar = (
            Builder()
            .lattice_vectors([[4.0, 0.0, 0.0], [0.0, 4.0, 0.0], [0.0, 0.0, 4.0]])
            .group_symbols(["Si"])
            .positions(Coords.frac([[0.0, 0.0, 0.0], [0.5, 0.5, 0.5]]))
            .build()
        )
    """

    def __init__(self) -> None:
        self._data: _BuilderData | None = _BuilderData()

    def _get(self) -> _BuilderData:
        if self._data is None:
            raise RuntimeError(_ALREADY_CONSUMED_MSG)
        return self._data

    def _take(self) -> _BuilderData:
        data = self._get()
        self._data = None
        return data

    def copy(self) -> Builder:
        out = Builder()
        out._data = copy.deepcopy(self._get())
        return out

    def comment(self, text: str) -> Builder:
        self._get().comment = str(text)
        return self

    def scale(self, scale: ScaleLine) -> Builder:
        self._get().scale = scale
        return self

    def lattice_vectors(self, vectors: Any) -> Builder:
        self._get().lattice_vectors = np.array(vectors, dtype=float)
        return self

    def dummy_lattice_vectors(self) -> Builder:
        self._get().lattice_vectors = np.eye(3)
        return self

    def positions(self, coords: Coords) -> Builder:
        self._get().positions = copy.deepcopy(coords)
        return self

    def zero_positions(self, tag: CoordsTag) -> Builder:
        self._get().positions = CoordsTag(tag)
        return self

    def velocities(self, coords: Coords) -> Builder:
        self._get().velocities = copy.deepcopy(coords)
        return self

    def zero_velocities(self, tag: CoordsTag) -> Builder:
        self._get().velocities = CoordsTag(tag)
        return self

    def no_velocities(self) -> Builder:
        self._get().velocities = None
        return self

    def group_counts(self, counts: Iterable[int]) -> Builder:
        self._get().group_counts = [int(c) for c in counts]
        return self

    def auto_group_counts(self) -> Builder:
        self._get().group_counts = None
        return self

    def group_symbols(self, symbols: Iterable[str]) -> Builder:
        self._get().group_symbols = [str(s) for s in symbols]
        return self

    def no_group_symbols(self) -> Builder:
        self._get().group_symbols = None
        return self

    def dynamics(self, flags: Any) -> Builder:
        self._get().dynamics = np.array(flags, dtype=bool)
        return self

    def no_dynamics(self) -> Builder:
        self._get().dynamics = None
        return self

    def build_raw(self) -> RawPoscar:
        """Consume the builder and assemble an unvalidated ``RawPoscar``."""

        data = self._take()

        if data.lattice_vectors is None:
            raise RuntimeError("missing required field 'lattice_vectors'")
        if data.positions is None:
            raise RuntimeError("missing required field 'positions'")

        # group_counts wins over positions when the two disagree; the
        # mismatch is left for validate() to report
        if isinstance(data.positions, CoordsTag):
            if data.group_counts is None:
                raise RuntimeError("cannot determine number of atoms")
            counts = data.group_counts
            positions = Coords.zeros(data.positions, sum(counts))
        else:
            positions = data.positions
            counts = [len(positions)] if data.group_counts is None else data.group_counts
        n = sum(counts)

        velocities = data.velocities
        if isinstance(velocities, CoordsTag):
            velocities = Coords.zeros(velocities, n)

        return RawPoscar(
            comment=data.comment,
            scale=data.scale,
            lattice_vectors=data.lattice_vectors,
            group_symbols=data.group_symbols,
            group_counts=counts,
            positions=positions,
            velocities=velocities,
            dynamics=data.dynamics,
        )

    def build(self) -> Poscar:
        return self.build_raw().validate()
