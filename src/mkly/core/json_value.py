"""Safe parsing of JSON objects and plain object literals.

Parsing strategy:

1. Strict :func:`json.loads`.
2. Otherwise, textual normalisation of an object literal such as
   ``{ name: 'Jane', age: 25, }`` into JSON. Input containing words
   that suggest executable code is rejected before normalisation.
3. The root must be a mapping.
4. The mapping is sanitised recursively: ``__proto__``, ``prototype``
   and ``constructor`` keys are rejected, and only JSON data types may
   appear as values.

Nothing is ever evaluated.
"""

from __future__ import annotations

import json
import re
from typing import Any

from mkly.exceptions import InvalidValueError
from mkly.utils.constants import FORBIDDEN_JSON_KEYS, FORBIDDEN_JSON_TOKENS

_UNQUOTED_KEY = re.compile(r"([{,]\s*)([a-zA-Z_$][\w$]*)\s*:")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_PLAIN_TYPES = (str, int, float, bool, type(None))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def object_literal_to_json(text: str) -> str:
    """Rewrite an object literal as JSON text without evaluating it."""
    if FORBIDDEN_JSON_TOKENS.search(text):
        raise InvalidValueError(
            "Unsafe JavaScript object",
            value_kind="json",
            raw=text,
            hint="Functions, classes, or runtime expressions are not allowed.",
        )
    normalized = text.strip()
    normalized = normalized.removeprefix("(").removesuffix(")")
    normalized = normalized.replace("'", '"')
    normalized = _UNQUOTED_KEY.sub(r'\1"\2":', normalized)
    return _TRAILING_COMMA.sub(r"\1", normalized)


def sanitize(obj: dict[str, Any], raw: str) -> dict[str, Any]:
    """Return a copy of *obj* with every key and nested value checked."""
    clean: dict[str, Any] = {}
    for key, value in obj.items():
        if key in FORBIDDEN_JSON_KEYS:
            raise InvalidValueError(
                "Invalid JSON key",
                value_kind="json",
                raw=raw,
                received=[key],
                hint=f'Key "{key}" is not allowed for security reasons.',
            )
        clean[key] = _sanitize_value(value, raw)
    return clean


def _sanitize_value(value: Any, raw: str) -> Any:
    if isinstance(value, dict):
        return sanitize(value, raw)
    if isinstance(value, list):
        return [_sanitize_value(item, raw) for item in value]
    if isinstance(value, _PLAIN_TYPES):
        return value
    raise InvalidValueError(
        "Invalid value type",
        value_kind="json",
        raw=raw,
        received=[repr(value)],
        hint="Only plain objects, arrays and primitives are allowed.",
    )


def _decode(text: str) -> Any:
    try:
        return _loads(text)
    except ValueError:
        pass
    try:
        return _loads(object_literal_to_json(text))
    except ValueError:
        raise InvalidValueError(
            "Invalid object syntax",
            value_kind="json",
            raw=text,
            expected=['{"key": "value"}', "{ key: 'value' }"],
            examples=['{"name": "John", "age": 30}', "{ name: 'Jane', age: 25 }"],
            hint="Only plain JavaScript object literals are allowed.",
        ) from None


def parse_json(text: str) -> dict[str, Any]:
    """Parse *text* into a sanitised ``dict``.

    Raises
    ------
    InvalidValueError
        On syntax errors, unsafe tokens, a non-object root, forbidden
        keys, or nesting deeper than the interpreter can walk.
    """
    try:
        parsed = _decode(text)
        if not isinstance(parsed, dict):
            raise InvalidValueError(
                "Invalid root value",
                value_kind="json",
                raw=text,
                expected=["Plain object"],
                received=[type(parsed).__name__ if parsed is not None else "null"],
            )
        return sanitize(parsed, text)
    except RecursionError:
        raise InvalidValueError(
            "Object is nested too deeply",
            value_kind="json",
            raw=text,
            received=(),
            hint="Flatten the structure or pass fewer nested levels.",
        ) from None
