"""Duration values: ``"1h30m"``, ``"500ms"`` or a wall-clock date.

Two grammars are accepted, tried in order:

1. A date such as ``2025-12-28 14:00``, ``2025/12/28`` or ``28-12-25``.
   ``/`` is normalised to ``-``, day-first dates are reordered and
   two-digit years are placed in the 2000s. The value is the number of
   milliseconds from *now* until that instant (negative in the past).
2. One or more ``<number><unit>`` segments, units ``ms s m h d w mo y``,
   summed into milliseconds.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from datetime import datetime
from functools import total_ordering

from mkly.exceptions import InvalidValueError
from mkly.utils.constants import DURATION_UNITS_MS

_UNIT = "ms|mo|s|m|h|d|w|y"
_SEGMENT = re.compile(rf"(\d+(?:\.\d+)?)({_UNIT})")
_DURATION = re.compile(rf"^(?:\s*\d+(?:\.\d+)?(?:{_UNIT}))+\s*$")
_DAY_FIRST = re.compile(r"^(\d{2})-(\d{2})-(\d{2,4})")

_EXAMPLES = ("5s", "1h30m", "2025-12-28 14:00")


def _reorder_day_first(match: re.Match[str]) -> str:
    day, month, year = match.groups()
    if len(year) == 2:
        year = f"20{year}"
    return f"{year}-{month}-{day}"


def parse_date_ms(text: str, now: Callable[[], float] = time.time) -> int | None:
    """Milliseconds from *now* until the date in *text*, or ``None``."""
    normalized = _DAY_FIRST.sub(_reorder_day_first, text.strip().replace("/", "-"))
    try:
        instant = datetime.fromisoformat(normalized).timestamp()
    except (ValueError, OverflowError, OSError):
        return None
    return round((instant - now()) * 1000)


def parse_duration_ms(text: str) -> int | float | None:
    """Sum of all ``<number><unit>`` segments, or ``None`` if malformed."""
    if not _DURATION.match(text):
        return None
    total: int | float = 0
    for number, unit in _SEGMENT.findall(text):
        amount = float(number) if "." in number else int(number)
        total += amount * DURATION_UNITS_MS[unit]
    return total


@total_ordering
class Duration:
    """A span of time stored as milliseconds."""

    __slots__ = ("raw", "value")

    def __init__(self, text: str, *, now: Callable[[], float] = time.time) -> None:
        if not text.strip():
            raise InvalidValueError(
                "Time must be a non-empty string",
                value_kind="time",
                raw=text,
                examples=_EXAMPLES,
                hint="Provide a valid time duration or date string.",
            )
        self.raw: str = text
        self.value: int | float = self._parse_ms(text, now)

    @staticmethod
    def _parse_ms(text: str, now: Callable[[], float]) -> int | float:
        date_ms = parse_date_ms(text, now)
        if date_ms is not None:
            return date_ms
        duration_ms = parse_duration_ms(text)
        if duration_ms is not None:
            return duration_ms
        raise InvalidValueError(
            "Invalid Time format.",
            value_kind="time",
            raw=text,
            expected=[f"<number>{unit}" for unit in DURATION_UNITS_MS],
            examples=_EXAMPLES,
            hint='Provide a valid time duration (e.g., "5s", "1h30m") '
            'or date string (e.g., "2025-12-28 14:00").',
        )

    # ------------------------------------------------------------------
    # Unit views
    # ------------------------------------------------------------------

    @property
    def ms(self) -> int | float:
        return self.value

    @property
    def seconds(self) -> float:
        return self.value / 1_000

    @property
    def minutes(self) -> float:
        return self.value / 60_000

    @property
    def hours(self) -> float:
        return self.value / 3_600_000

    @property
    def days(self) -> float:
        return self.value / 86_400_000

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    @property
    def is_positive(self) -> bool:
        return self.value > 0

    # ------------------------------------------------------------------
    # Protocols
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.value}ms"

    def __repr__(self) -> str:
        return f"Duration({self.raw!r}, ms={self.value})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Duration):
            return self.value == other.value
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Duration):
            return self.value < other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    # ------------------------------------------------------------------
    # Validation / construction
    # ------------------------------------------------------------------

    @classmethod
    def is_valid(cls, value: object) -> bool:
        """Whether *value* is a string accepted by either grammar."""
        if not isinstance(value, str) or not value.strip():
            return False
        return parse_date_ms(value) is not None or parse_duration_ms(value) is not None

    @classmethod
    def parse(cls, value: object) -> Duration:
        if isinstance(value, Duration):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Invalid Duration value: {value!r}")
        return cls(value)
