from .reformat import build_parser, main, reformat_poscar

__all__ = ["build_parser", "main", "reformat_poscar"]
