"""Typed value coercion: raw string -> value of a declared :class:`ValueKind`.

Each scalar kind has one parser. Array kinds split the raw string into
comma-separated elements (optionally wrapped in ``[...]``) and run the
scalar parser on every element. All failures raise
:class:`~mkly.exceptions.InvalidValueError`.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Collection, Mapping
from typing import Any

from mkly.core.json_value import parse_json
from mkly.core.models import ValueKind
from mkly.exceptions import InvalidValueError
from mkly.utils.constants import FALSE_VALUES, TRUE_VALUES
from mkly.values import ByteSize, Duration, FsPath


# ---------------------------------------------------------------------------
# Scalar parsers
# ---------------------------------------------------------------------------

def parse_boolean(raw: str) -> bool:
    """``true/1/yes/on`` and ``false/0/no/off``, case-insensitive."""
    text = raw.strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise InvalidValueError(
        f"Invalid boolean: {raw}",
        value_kind=ValueKind.BOOLEAN.value,
        raw=raw,
        expected=(*TRUE_VALUES, *FALSE_VALUES),
        hint=True,
    )


def parse_number(raw: str) -> int | float:
    """Integer when the literal is integral, float otherwise.

    Digit separators (``1_000``) and non-finite words (``inf``, ``nan``)
    are rejected.
    """
    text = raw.strip()
    if "_" not in text:
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            pass
        else:
            if math.isfinite(number):
                return number
    raise InvalidValueError(
        f"Invalid number: {raw}",
        value_kind=ValueKind.NUMBER.value,
        raw=raw,
        examples=("42", "-3.14", "0"),
        hint="Use a numeric value like 0, 1, -1 or 3.14",
    )


def parse_choice(raw: str, choices: Collection[str]) -> str:
    text = raw.strip()
    if text in choices:
        return text
    raise InvalidValueError(
        f"Invalid choice: {raw}",
        value_kind=ValueKind.CHOICE.value,
        raw=raw,
        expected=choices,
        hint=f"Valid choices are: {', '.join(choices)}",
    )


def parse_list(raw: str) -> list[str]:
    """Split ``a, b, c`` or ``[a, b, c]`` into trimmed, non-empty items."""
    text = raw.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    if not text.strip():
        raise InvalidValueError(
            "Input string is empty or whitespace only",
            raw=raw,
            expected=("12,34,56", "apple, banana, cherry", '["value1", "value2", "value3"]'),
        )
    return [item.strip() for item in text.split(",") if item.strip()]


def _parse_string(raw: str) -> str:
    return raw


_SCALAR_PARSERS: Mapping[ValueKind, Callable[[str], Any]] = {
    ValueKind.BOOLEAN: parse_boolean,
    ValueKind.STRING: _parse_string,
    ValueKind.NUMBER: parse_number,
    ValueKind.PATH: FsPath,
    ValueKind.TIME: Duration,
    ValueKind.SIZE: ByteSize,
    ValueKind.JSON: parse_json,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _coerce_scalar(kind: ValueKind, raw: str, choices: Collection[str]) -> Any:
    if kind is ValueKind.CHOICE:
        return parse_choice(raw, choices)
    return _SCALAR_PARSERS[kind](raw)


def coerce(
    kind: ValueKind | str,
    raw: str,
    choices: Collection[str] = (),
) -> Any:
    """Convert *raw* to the Python value for *kind*.

    Raises
    ------
    InvalidValueError
        When *raw* does not match the grammar of *kind* (or of any
        element, for array kinds).
    InvalidDefinitionError
        When *kind* names no :class:`ValueKind`.
    """
    kind = ValueKind.of(kind)
    if not kind.is_array:
        return _coerce_scalar(kind, raw, choices)
    element = kind.element
    return [_coerce_scalar(element, item, choices) for item in parse_list(raw)]


def coerce_default(kind: ValueKind, default: Any, choices: Collection[str] = ()) -> Any:
    """Coerce a declared default; already-typed defaults pass through."""
    if isinstance(default, str):
        return coerce(kind, default, choices)
    if kind.is_array and isinstance(default, list | tuple):
        return [
            _coerce_scalar(kind.element, item, choices) if isinstance(item, str) else item
            for item in default
        ]
    return default
