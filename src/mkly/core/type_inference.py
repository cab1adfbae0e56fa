"""Best-effort inference of what kind of value the user typed.

Used in diagnostics to tell the user, for instance, that ``"10"`` looks
like a number where a size was expected.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from mkly.values import ByteSize, Duration, FsPath

_NUMBER = re.compile(r"^-?\d+(\.\d+)?$")


def _array_type(values: Iterable[object]) -> str:
    # Preserve first-seen order of element types.
    types = dict.fromkeys(infer_type(value) for value in values)
    return f"array<{', '.join(types)}>"


def infer_type(value: object) -> str:
    """Return a short type label for *value*.

    Runtime values map to ``null``, ``boolean``, ``number``, ``nan``,
    ``object`` and ``array<...>``. Strings are inspected for quoted
    literals, inline objects, inline or comma-separated arrays,
    numbers, sizes, durations and paths before falling back to
    ``string``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "nan" if isinstance(value, float) and math.isnan(value) else "number"
    if isinstance(value, list | tuple):
        return _array_type(value)
    if isinstance(value, dict):
        return "object"
    if not isinstance(value, str):
        return "object"

    text = value.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return "string"
    if text.startswith("{") and text.endswith("}"):
        return "object"
    if text.startswith("[") and text.endswith("]"):
        return _array_type(item.strip() for item in text[1:-1].split(","))
    if "," in text:
        return _array_type(item.strip() for item in text.split(","))
    if _NUMBER.match(text):
        return "number"
    if ByteSize.is_valid(text):
        return "size"
    if Duration.is_valid(text):
        return "time"
    if FsPath.is_valid(text) and ("/" in text or "\\" in text):
        return "path"
    return "string"
