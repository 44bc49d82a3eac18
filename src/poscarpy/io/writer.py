"""POSCAR text writer."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from poscarpy.core.poscar import Poscar


logger = logging.getLogger(__name__)

_SPEC_RE = re.compile(r"(?P<width>\d+)?(?:\.(?P<precision>\d+))?", re.ASCII)


@dataclass(frozen=True)
class FloatFormat:
    """How every float in the document is printed.

    With neither knob set, floats are written in the shortest form that reads
    back to the identical value. Otherwise ``precision`` selects fixed-point
    digits and ``width`` right-aligns each number.
    """

    width: int | None = None
    precision: int | None = None

    def __post_init__(self) -> None:
        if self.width is not None and self.width < 0:
            raise ValueError("FloatFormat.width must be non-negative.")
        if self.precision is not None and self.precision < 0:
            raise ValueError("FloatFormat.precision must be non-negative.")

    @classmethod
    def from_spec(cls, spec: str) -> FloatFormat:
        """Build from a ``"[width][.precision]"`` format spec, e.g. ``"9.6"``."""

        m = _SPEC_RE.fullmatch(spec)
        if m is None:
            raise ValueError(f"Invalid format spec for Poscar: {spec!r}")
        width = m.group("width")
        precision = m.group("precision")
        return cls(
            width=None if width is None else int(width),
            precision=None if precision is None else int(precision),
        )

    @property
    def is_round_trip(self) -> bool:
        return self.width is None and self.precision is None

    def __call__(self, x: float) -> str:
        x = float(x)
        if self.precision is None:
            text = repr(x)
        else:
            text = format(x, f".{self.precision}f")
        if self.width is not None:
            text = text.rjust(self.width)
        return text


ROUND_TRIP = FloatFormat()


def _by3(values: Iterable[Any], fmt) -> str:
    return " ".join(fmt(v) for v in values)


def _flag(b: bool) -> str:
    return "T" if b else "F"


def iter_poscar_lines(poscar: Poscar, fmt: FloatFormat = ROUND_TRIP) -> Iterable[str]:
    """Lines of the canonical text form, without terminators."""

    raw = poscar._raw

    yield raw.comment

    # a volume is written as a negative number
    scale = raw.scale
    yield "  " + fmt(-scale.value if scale.is_volume else scale.value)

    for row in raw.lattice_vectors:
        yield "    " + _by3(row, fmt)

    if raw.group_symbols is not None:
        yield "  " + " ".join(f"{s:>2}" for s in raw.group_symbols)
    yield "  " + " ".join(f"{c:>2}" for c in raw.group_counts)

    if raw.dynamics is not None:
        yield "Selective Dynamics"

    yield "Cartesian" if raw.positions.is_cart else "Direct"
    for i, pos in enumerate(raw.positions.data):
        line = "  " + _by3(pos, fmt)
        if raw.dynamics is not None:
            line += " " + _by3(raw.dynamics[i], _flag)
        yield line

    if raw.velocities is not None:
        # a blank line is how CONTCAR files mark direct velocities
        yield "Cartesian" if raw.velocities.is_cart else ""
        for vel in raw.velocities.data:
            yield "  " + _by3(vel, fmt)


def format_poscar(poscar: Poscar, fmt: FloatFormat | None = None) -> str:
    if not isinstance(poscar, Poscar):
        raise TypeError(f"format_poscar() requires a validated Poscar, got {type(poscar).__name__}.")
    fmt = ROUND_TRIP if fmt is None else fmt
    return "".join(line + "\n" for line in iter_poscar_lines(poscar, fmt))


def write_poscar(poscar: Poscar, dest: Any, fmt: FloatFormat | None = None) -> None:
    """Write to a filesystem path or an open text file."""

    text = format_poscar(poscar, fmt)
    if isinstance(dest, (str, os.PathLike)):
        path = Path(dest)
        logger.debug("writing POSCAR file %s", path)
        with path.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(text)
        return
    dest.write(text)
