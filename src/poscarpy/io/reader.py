"""POSCAR text reader.

The grammar is walked top to bottom in a single pass:

- comment line (verbatim)
- scale line
- three lattice vector lines
- optional symbols line, then the counts line
- optional selective dynamics line, then the coordinate system line
- one line per site (3 reals, plus 3 logicals under selective dynamics)
- optional velocity block (coordinate system line + one line per site)
- nothing but blank lines

Anything after the recognized words of a line is a freeform comment.
"""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import Any, Iterable

import numpy as np

from poscarpy.core.poscar import Poscar
from poscarpy.core.types import Coords, CoordsTag, RawPoscar, ScaleLine
from poscarpy.modeling.validators import ValidationError

from .errors import ParseErrorKind, PrimitiveParseError
from .primitives import parse_logical, parse_real, parse_unsigned
from .scanner import Lines, Spanned, split_lines


logger = logging.getLogger(__name__)

_CART_CHARS = frozenset("cCkK")
_SELECTIVE_CHARS = frozenset("sS")


def _read_scale(lines: Lines) -> ScaleLine:
    line = lines.next()
    words = line.words()
    word = words.next_or_err("expected scale")
    value = word.parse(parse_real)

    if math.isnan(value):
        raise word.error(ParseErrorKind.SCALE_CANNOT_BE_NAN, "scale cannot be nan")
    if value == 0.0:
        raise word.error(ParseErrorKind.SCALE_CANNOT_BE_ZERO, "scale cannot be zero")
    scale = ScaleLine.volume(-value) if value < 0.0 else ScaleLine.factor(value)

    # VASP reads three floats here as per-axis scales. Nobody else does, and a
    # missing scale line also puts three floats here, so two or more is an error.
    extra = next(words, None)
    if extra is not None:
        try:
            parse_real(extra.text)
        except PrimitiveParseError:
            pass
        else:
            raise extra.error(
                ParseErrorKind.TOO_MANY_SCALE_VALUES,
                "too many floats on scale line (expected just one)",
            )
    return scale


def _read_lattice(lines: Lines) -> np.ndarray:
    rows = []
    for _ in range(3):
        line = lines.next()
        words = line.words()
        rows.append(
            [words.next_or_err("expected three components for lattice vector").parse(parse_real) for _ in range(3)]
        )
    return np.asarray(rows, dtype=float)


def _read_counts_line(line: Spanned) -> list[int]:
    counts = []
    for word in line.words():
        try:
            counts.append(parse_unsigned(word.text))
        except PrimitiveParseError:
            # first non-integer starts the freeform comment
            break
    return counts


def _read_groups(lines: Lines) -> tuple[list[str] | None, list[int]]:
    line = lines.next()
    words = line.words()
    first = words.next_or_err("expected at least one element or count")

    if "0" <= first.text[0] <= "9":
        symbols = None
        counts_line = line
    else:
        symbols = []
        for word in line.words():
            if "0" <= word.text[0] <= "9" or any(ch.isspace() for ch in word.text):
                raise word.error(ParseErrorKind.INVALID_SYMBOL, f"invalid symbol: {word.text!r}")
            symbols.append(word.text)
        counts_line = lines.next()

    counts = _read_counts_line(counts_line)
    if symbols is not None and len(symbols) != len(counts):
        raise counts_line.error(ParseErrorKind.INCONSISTENT_GROUP_COUNT, "Inconsistent number of counts")
    if sum(counts) == 0:
        raise counts_line.error(ParseErrorKind.NO_ATOMS, "There must be at least one atom.")
    return symbols, counts


def _coords_tag(line: Spanned, what: str) -> CoordsTag:
    """Cartesian iff the untrimmed first character is c/C/k/K; anything else is fractional."""

    ch = line.control_char()
    if ch is not None and ch in _CART_CHARS:
        return CoordsTag.CART
    if ch is not None and ch.isspace() and not line.is_blank():
        first = line.first_word()
        if first.text[0] in _CART_CHARS:
            logger.warning(
                "line %d: indented %s coordinate line %r is read as Direct; "
                "only the very first character is significant",
                line.line + 1,
                what,
                line.text,
            )
        elif what == "velocity":
            logger.warning(
                "line %d: reading %r as the velocity coordinate system line (Direct)",
                line.line + 1,
                line.text,
            )
    return CoordsTag.FRAC


def _read_flags(lines: Lines) -> tuple[bool, CoordsTag]:
    line = lines.next()
    selective = line.control_char() in _SELECTIVE_CHARS
    if selective:
        line = lines.next()
    # rest of the line is freeform
    return selective, _coords_tag(line, "position")


def _read_vectors(lines: Lines, n: int, *, with_flags: bool) -> tuple[np.ndarray, np.ndarray | None]:
    vectors = np.empty((n, 3), dtype=float)
    flags = np.empty((n, 3), dtype=bool) if with_flags else None
    for i in range(n):
        line = lines.next()
        words = line.words()
        for k in range(3):
            vectors[i, k] = words.next_or_err("expected 3 coordinates").parse(parse_real)
        if flags is not None:
            for k in range(3):
                flags[i, k] = words.next_or_err("expected 3 boolean flags").parse(parse_logical)
    return vectors, flags


def _read_velocities(lines: Lines, n: int) -> Coords | None:
    line = lines.next_or_none()
    if line is None:
        return None
    if line.is_blank():
        following = lines.peek()
        if following is None or following.is_blank():
            # only trailing whitespace from here on
            return None
    tag = _coords_tag(line, "velocity")
    data, _ = _read_vectors(lines, n, with_flags=False)
    return Coords(tag, data)


def _check_trailing(lines: Lines) -> None:
    for line in lines:
        word = line.first_word()
        if word is not None:
            raise word.error(ParseErrorKind.UNEXPECTED_TRAILING_CONTENT, "expected end of file")


def parse_raw_lines(lines: Iterable[str], path: str | None = None) -> RawPoscar:
    """Parse lines into a ``RawPoscar`` without the final validation step."""

    scanner = Lines(lines, path)

    comment_line = scanner.next()
    if "\r" in comment_line.text or "\n" in comment_line.text:
        raise comment_line.error(ParseErrorKind.NEWLINE_IN_COMMENT, "comment line contains a line break")
    comment = comment_line.text
    scale = _read_scale(scanner)
    lattice = _read_lattice(scanner)
    symbols, counts = _read_groups(scanner)
    n = sum(counts)
    selective, tag = _read_flags(scanner)
    positions, dynamics = _read_vectors(scanner, n, with_flags=selective)
    velocities = _read_velocities(scanner, n)
    _check_trailing(scanner)

    return RawPoscar(
        comment=comment,
        scale=scale,
        lattice_vectors=lattice,
        group_symbols=symbols,
        group_counts=counts,
        positions=Coords(tag, positions),
        velocities=velocities,
        dynamics=dynamics,
    )


def parse_lines(lines: Iterable[str], path: str | None = None) -> Poscar:
    """Parse a sequence of lines (terminators optional) into a ``Poscar``.

    ``path`` is only used to prefix error messages.
    """

    raw = parse_raw_lines(lines, path)
    try:
        poscar = raw.validate()
    except ValidationError as exc:
        raise AssertionError(f"an invariant was not checked during parsing (this is a bug!): {exc}") from exc
    logger.debug(
        "parsed POSCAR from %s: %d sites in %d groups",
        path or "<input>",
        poscar.num_sites,
        len(poscar.group_counts),
    )
    return poscar


def parse_poscar(text: str, path: str | None = None) -> Poscar:
    return parse_lines(split_lines(text), path)


def read_poscar(source: Any) -> Poscar:
    """Read a POSCAR from a filesystem path or an open text file."""

    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        logger.debug("reading POSCAR file %s", path)
        with path.open("r", encoding="utf-8", newline="") as fh:
            return parse_lines(fh, str(path))

    name = getattr(source, "name", None)
    return parse_lines(source, name if isinstance(name, str) else None)
