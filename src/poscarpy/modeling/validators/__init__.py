from .poscar_validator import ValidationError, ValidationErrorKind, validate_raw_poscar

__all__ = ["ValidationError", "ValidationErrorKind", "validate_raw_poscar"]
