from poscarpy.io.errors import ParseError, ParseErrorKind, PrimitiveParseError
from poscarpy.io.reader import parse_lines, parse_poscar, parse_raw_lines, read_poscar
from poscarpy.io.writer import FloatFormat, format_poscar, write_poscar

__all__ = [
    "ParseError",
    "ParseErrorKind",
    "PrimitiveParseError",
    "parse_lines",
    "parse_raw_lines",
    "parse_poscar",
    "read_poscar",
    "FloatFormat",
    "format_poscar",
    "write_poscar",
]
