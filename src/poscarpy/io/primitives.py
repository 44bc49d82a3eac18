"""Token-level parsers for reals, unsigned integers and Fortran logicals."""

from __future__ import annotations

import re

from .errors import ParseErrorKind, PrimitiveParseError


_REAL_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE | re.ASCII,
)
_UNSIGNED_RE = re.compile(r"[0-9]+")


def parse_real(text: str) -> float:
    """Decimal or exponential float syntax, plus ``inf`` and ``nan``."""

    if _REAL_RE.fullmatch(text) is None:
        raise PrimitiveParseError(ParseErrorKind.INVALID_NUMBER, f"invalid float literal: {text!r}")
    return float(text)


def parse_unsigned(text: str) -> int:
    """ASCII decimal digits only; an explicit ``+`` sign is rejected."""

    if text.startswith("+"):
        raise PrimitiveParseError(
            ParseErrorKind.LEADING_PLUS_NOT_ALLOWED, f"leading '+' not allowed in count: {text!r}"
        )
    if _UNSIGNED_RE.fullmatch(text) is None:
        raise PrimitiveParseError(ParseErrorKind.INVALID_NUMBER, f"invalid digit for integer: {text!r}")
    return int(text)


def parse_logical(text: str) -> bool:
    """Read a LOGICAL the way Fortran list-directed input does.

    An optional ``.`` followed by ``T`` or ``F`` in either case; whatever comes
    after is ignored, so ``.TRUE.``, ``.t`` and ``Technomatic`` are all true.
    """

    s = text[1:] if text.startswith(".") else text
    head = s[:1]
    if head in ("t", "T"):
        return True
    if head in ("f", "F"):
        return False
    raise PrimitiveParseError(ParseErrorKind.INVALID_LOGICAL, f"invalid Fortran logical value: {text!r}")
