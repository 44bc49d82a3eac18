from .linalg import cross3, det33, dot3, inv33, mul3_33, muln3_33, scale33, scalen3
from .poscar import Group, Poscar
from .types import Coords, CoordsTag, RawPoscar, ScaleKind, ScaleLine

__all__ = [
    "Coords",
    "CoordsTag",
    "RawPoscar",
    "ScaleKind",
    "ScaleLine",
    "Poscar",
    "Group",
    "cross3",
    "dot3",
    "det33",
    "inv33",
    "mul3_33",
    "muln3_33",
    "scale33",
    "scalen3",
]
