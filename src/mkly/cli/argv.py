"""Argument-vector normalisation.

The engine only ever sees user arguments. This adapter removes the
interpreter and script entries that precede them in a raw argv, e.g.
``["python", "-m", "tool", "build"]`` or ``["tool.py", "build"]``.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import PurePath

_SCRIPT_SUFFIXES = (".py", ".pyz", ".pyw")


def _is_interpreter(entry: str) -> bool:
    name = PurePath(entry).name.lower()
    return name.startswith(("python", "pypy"))


def normalize_arguments(argv: Sequence[str]) -> list[str]:
    """Return only the user-supplied entries of *argv*."""
    if argv is sys.argv:
        return list(argv[1:])

    args = list(argv)
    if args and _is_interpreter(args[0]):
        args = args[1:]
        if len(args) >= 2 and args[0] == "-m":
            return args[2:]
    if args and args[0].endswith(_SCRIPT_SUFFIXES):
        return args[1:]
    return args
