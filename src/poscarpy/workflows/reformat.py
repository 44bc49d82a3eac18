"""Rewrite a POSCAR file in canonical form, optionally converting coordinates."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from poscarpy.core.poscar import Poscar
from poscarpy.io import FloatFormat, ParseError, format_poscar, read_poscar


def reformat_poscar(
    poscar: Poscar,
    *,
    coords: str | None = None,
    fmt: FloatFormat | None = None,
) -> str:
    """Canonical text for ``poscar`` with positions in ``coords`` ("cart"/"frac")."""

    if coords == "cart":
        poscar = poscar.with_cart_positions()
    elif coords == "frac":
        poscar = poscar.with_frac_positions()
    elif coords is not None:
        raise ValueError(f"Unknown coordinate system '{coords}'. Use 'cart' or 'frac'.")
    return format_poscar(poscar, fmt)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="poscar-reformat", description=__doc__)
    parser.add_argument("input", type=Path, help="POSCAR file to read.")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output path (default: stdout).")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--cartesian", dest="coords", action="store_const", const="cart", help="Write Cartesian positions.")
    mode.add_argument("--direct", dest="coords", action="store_const", const="frac", help="Write fractional positions.")
    parser.add_argument("--width", type=int, default=None, help="Minimum field width of every float.")
    parser.add_argument("--precision", type=int, default=None, help="Fixed number of decimals for every float.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    fmt = FloatFormat(width=args.width, precision=args.precision)
    try:
        poscar = read_poscar(args.input)
    except (OSError, ParseError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    text = reformat_poscar(poscar, coords=args.coords, fmt=fmt)
    if args.output is None:
        sys.stdout.write(text)
    else:
        args.output.write_text(text, encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
