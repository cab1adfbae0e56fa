"""Grammar constants shared by the token classifier, coercion and values.

Centralised here so that every parser reads the same literal tables
rather than repeating them.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Reserved flags
# ---------------------------------------------------------------------------

VERSION_KEYS: frozenset[str] = frozenset({"version", "v"})
"""Flag keys that short-circuit resolution and report the version."""

HELP_KEYS: frozenset[str] = frozenset({"help", "h"})
"""Flag keys that short-circuit resolution and request help output."""

# ---------------------------------------------------------------------------
# Token shapes
# ---------------------------------------------------------------------------

END_OF_FLAGS: str = "--"
NEGATION_PREFIX: str = "--no-"

SHORT_ALIAS_WITH_VALUE: re.Pattern[str] = re.compile(r"^-(\w+)=(.*)$", re.DOTALL)
"""``-o=out.txt`` / ``-p=3000``."""

SHORT_ALIAS: re.Pattern[str] = re.compile(r"^-(\w+)$")
"""``-m`` / ``-x123`` / ``-5``. Negative numbers are passed after ``--`` or inline (``--n=-5``)."""

# ---------------------------------------------------------------------------
# Boolean literals (compared trimmed, lower-cased)
# ---------------------------------------------------------------------------

TRUE_VALUES: tuple[str, ...] = ("true", "1", "yes", "on")
FALSE_VALUES: tuple[str, ...] = ("false", "0", "no", "off")

# ---------------------------------------------------------------------------
# Duration units, in milliseconds
# ---------------------------------------------------------------------------

DURATION_UNITS_MS: dict[str, int] = {
    "ms": 1,
    "s": 1_000,
    "m": 60_000,
    "h": 3_600_000,
    "d": 86_400_000,
    "w": 604_800_000,
    "mo": 2_629_800_000,  # 30.44 days
    "y": 31_557_600_000,  # 365.25 days
}

# ---------------------------------------------------------------------------
# Byte-size units, base 1024
# ---------------------------------------------------------------------------

SIZE_UNITS: tuple[str, ...] = ("b", "kb", "mb", "gb", "tb", "pb")
SIZE_FACTORS: dict[str, int] = {unit: 1024**power for power, unit in enumerate(SIZE_UNITS)}

# ---------------------------------------------------------------------------
# JSON object literals
# ---------------------------------------------------------------------------

FORBIDDEN_JSON_TOKENS: re.Pattern[str] = re.compile(
    r"\b(function|class|new|return|process|require|import|export|eval|this|global|window)\b"
)
"""Words that never appear in plain data and hint at executable code."""

FORBIDDEN_JSON_KEYS: frozenset[str] = frozenset({"__proto__", "prototype", "constructor"})
