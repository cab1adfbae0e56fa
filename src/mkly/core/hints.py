"""Hint resolution for diagnostics.

A hint of ``True`` means "suggest something": the received values are
compared with the expected ones and the closest match is offered.
"""

from __future__ import annotations

import difflib
from collections.abc import Sequence

from mkly.exceptions import Hint


def suggest(received: str, expected: Sequence[str], cutoff: float = 0.6) -> str | None:
    """Closest expected value to *received*, or ``None``."""
    matches = difflib.get_close_matches(received.lower(), list(expected), n=1, cutoff=cutoff)
    return matches[0] if matches else None


def resolve_hint(hint: Hint, expected: Sequence[str], received: Sequence[str]) -> str | None:
    """Turn a hint policy into display text, or ``None`` for no hint."""
    if isinstance(hint, str):
        return hint
    if hint is not True:
        return None
    for value in received:
        match = suggest(value, expected)
        if match is not None:
            return f'Did you mean "{match}"?'
    if expected:
        return f"Expected one of: {', '.join(expected)}"
    return None
