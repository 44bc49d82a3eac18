from .core import Coords, CoordsTag, Group, Poscar, RawPoscar, ScaleKind, ScaleLine
from .io import FloatFormat, ParseError, ParseErrorKind, format_poscar, parse_lines, parse_poscar, read_poscar, write_poscar
from .modeling import Builder, ValidationError, ValidationErrorKind

__all__ = [
    "Coords",
    "CoordsTag",
    "ScaleKind",
    "ScaleLine",
    "RawPoscar",
    "Poscar",
    "Group",
    "Builder",
    "ValidationError",
    "ValidationErrorKind",
    "ParseError",
    "ParseErrorKind",
    "FloatFormat",
    "parse_lines",
    "parse_poscar",
    "read_poscar",
    "format_poscar",
    "write_poscar",
]
