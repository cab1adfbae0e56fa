"""Byte-size values: ``"10kb"``, ``"5MB"``, ``"500b"`` (base 1024)."""

from __future__ import annotations

import math
import re
from functools import total_ordering

from mkly.exceptions import InvalidValueError
from mkly.utils.constants import SIZE_FACTORS, SIZE_UNITS

_SIZE = re.compile(rf"^(\d+(?:\.\d+)?)({'|'.join(SIZE_UNITS)})$", re.IGNORECASE)
_EXAMPLES = ("10kb", "5mb", "1gb", "2tb", "500b")


def parse_bytes(text: str) -> int | float | None:
    """Byte count for ``<number><unit>``, or ``None`` if malformed."""
    match = _SIZE.match(text.strip())
    if match is None:
        return None
    number, unit = match.groups()
    amount = float(number) if "." in number else int(number)
    if isinstance(amount, float) and not math.isfinite(amount):
        return None
    total = amount * SIZE_FACTORS[unit.lower()]
    if isinstance(total, float) and total.is_integer():
        return int(total)
    return total


@total_ordering
class ByteSize:
    """A data size stored as bytes."""

    __slots__ = ("raw", "value")

    def __init__(self, text: str) -> None:
        value = parse_bytes(text)
        if value is None:
            raise InvalidValueError(
                'Invalid Size format. Expected "10kb", "5mb", "1gb", "2tb", "500b", etc.',
                value_kind="size",
                raw=text,
                expected=SIZE_UNITS,
                examples=_EXAMPLES,
                hint="Ensure the size string includes a valid number followed by "
                "a unit (b, kb, mb, gb, tb, pb).",
            )
        self.raw: str = text
        self.value: int | float = value

    @property
    def bytes(self) -> int | float:
        return self.value

    @property
    def kilobytes(self) -> float:
        return self.value / 1024

    @property
    def megabytes(self) -> float:
        return self.value / 1024**2

    @property
    def gigabytes(self) -> float:
        return self.value / 1024**3

    @property
    def terabytes(self) -> float:
        return self.value / 1024**4

    @property
    def petabytes(self) -> float:
        return self.value / 1024**5

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    @property
    def is_positive(self) -> bool:
        return self.value > 0

    def __str__(self) -> str:
        return f"{self.value}B"

    def __repr__(self) -> str:
        return f"ByteSize({self.raw!r}, bytes={self.value})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ByteSize):
            return self.value == other.value
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, ByteSize):
            return self.value < other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    @classmethod
    def is_valid(cls, value: object) -> bool:
        return isinstance(value, str) and parse_bytes(value) is not None

    @classmethod
    def parse(cls, value: object) -> ByteSize:
        if isinstance(value, ByteSize):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Invalid ByteSize value: {value!r}")
        return cls(value)
