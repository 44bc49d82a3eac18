"""Exceptions raised while reading POSCAR text."""

from __future__ import annotations

from enum import Enum


class ParseErrorKind(Enum):
    INVALID_NUMBER = "invalid_number"
    INVALID_LOGICAL = "invalid_logical"
    LEADING_PLUS_NOT_ALLOWED = "leading_plus_not_allowed"
    MISSING_FIELD = "missing_field"
    INVALID_SYMBOL = "invalid_symbol"
    NEWLINE_IN_COMMENT = "newline_in_comment"
    UNEXPECTED_END_OF_INPUT = "unexpected_end_of_input"
    SCALE_CANNOT_BE_ZERO = "scale_cannot_be_zero"
    SCALE_CANNOT_BE_NAN = "scale_cannot_be_nan"
    TOO_MANY_SCALE_VALUES = "too_many_scale_values"
    INCONSISTENT_GROUP_COUNT = "inconsistent_group_count"
    NO_ATOMS = "no_atoms"
    UNEXPECTED_TRAILING_CONTENT = "unexpected_trailing_content"


class PrimitiveParseError(ValueError):
    """A single token could not be read as the expected type."""

    def __init__(self, kind: ParseErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


class ParseError(ValueError):
    """Malformed input, located by source, line and column.

    ``line`` and ``col`` are 0-based; the rendered message uses 1-based
    numbers, e.g. ``POSCAR:7:1: Inconsistent number of counts``.
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        *,
        path: str | None = None,
        line: int | None = None,
        col: int | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.path = path
        self.line = line
        self.col = col
        super().__init__(str(self))

    def __str__(self) -> str:
        where = f"{self.path}:" if self.path is not None else "<input>:"
        if self.line is not None:
            if self.col is None:
                where += f"{self.line + 1}: "
            else:
                where += f"{self.line + 1}:{self.col + 1}: "
        else:
            where += " "
        return where + self.message
