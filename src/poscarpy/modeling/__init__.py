from .builder import Builder
from .validators import ValidationError, ValidationErrorKind, validate_raw_poscar

__all__ = ["Builder", "ValidationError", "ValidationErrorKind", "validate_raw_poscar"]
