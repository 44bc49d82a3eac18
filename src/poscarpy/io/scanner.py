"""Line and word scanning with source positions for error reporting."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Iterator, TypeVar

from .errors import ParseError, ParseErrorKind, PrimitiveParseError


T = TypeVar("T")

# Only space and tab separate words.
_WORD_RE = re.compile(r"[^ \t]+")


def split_words(text: str) -> list[str]:
    return _WORD_RE.findall(text)


def strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def split_lines(text: str) -> list[str]:
    """Split like a text file opened with ``newline=""``; terminators are dropped."""

    return [strip_terminator(ln) for ln in io.StringIO(text, newline="")]


@dataclass(frozen=True)
class Spanned:
    """A line or word of the input together with where it came from."""

    text: str
    line: int
    col: int = 0
    path: str | None = None

    def error(self, kind: ParseErrorKind, message: str, *, with_col: bool = True) -> ParseError:
        return ParseError(
            kind,
            message,
            path=self.path,
            line=self.line,
            col=self.col if with_col else None,
        )

    def words(self) -> Words:
        return Words(self)

    def first_word(self) -> Spanned | None:
        return next(iter(self.words()), None)

    def control_char(self) -> str | None:
        """First character of the text, untrimmed; ``None`` for an empty line."""

        return self.text[:1] or None

    def is_blank(self) -> bool:
        return not split_words(self.text)

    def parse(self, parser: Callable[[str], T]) -> T:
        try:
            return parser(self.text)
        except PrimitiveParseError as exc:
            raise self.error(exc.kind, exc.message) from exc


class Words:
    """Lazy iterator over the words of a :class:`Spanned` line."""

    def __init__(self, source: Spanned) -> None:
        self._source = source
        self._matches = _WORD_RE.finditer(source.text)

    def __iter__(self) -> Words:
        return self

    def __next__(self) -> Spanned:
        m = next(self._matches)
        return replace(self._source, text=m.group(0), col=self._source.col + m.start())

    def next_or_err(self, message: str) -> Spanned:
        """Next word, or a ``MISSING_FIELD`` error located at the line."""

        try:
            return next(self)
        except StopIteration:
            raise self._source.error(ParseErrorKind.MISSING_FIELD, message, with_col=False) from None


class Lines:
    """Sequential reader handing out :class:`Spanned` lines, with one line of lookahead."""

    def __init__(self, lines: Iterable[str], path: str | None = None) -> None:
        self._lines: Iterator[str] = iter(lines)
        self._peeked: Spanned | None = None
        self._exhausted = False
        self.path = path
        self.cur = 0

    def _pull(self) -> Spanned | None:
        if self._exhausted:
            return None
        try:
            text = next(self._lines)
        except StopIteration:
            self._exhausted = True
            return None
        spanned = Spanned(strip_terminator(text), line=self.cur, path=self.path)
        self.cur += 1
        return spanned

    def peek(self) -> Spanned | None:
        if self._peeked is None:
            self._peeked = self._pull()
        return self._peeked

    def next_or_none(self) -> Spanned | None:
        line = self.peek()
        self._peeked = None
        return line

    def next(self) -> Spanned:
        line = self.next_or_none()
        if line is None:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_END_OF_INPUT,
                "unexpected end of file",
                path=self.path,
                line=self.cur,
            )
        return line

    def __iter__(self) -> Iterator[Spanned]:
        while True:
            line = self.next_or_none()
            if line is None:
                return
            yield line
