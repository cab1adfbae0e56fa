"""Filesystem path values.

Any non-empty string without NUL bytes is a structurally valid path.
The absolute form is computed eagerly; every filesystem query runs
lazily when accessed, and OS failures surface as
:class:`~mkly.exceptions.PathAccessError`.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from mkly.exceptions import InvalidValueError, PathAccessError

_T = TypeVar("_T")


class FsPath:
    """A user-supplied path resolved against the current directory."""

    __slots__ = ("raw", "value")

    def __init__(self, text: str) -> None:
        if not text.strip():
            raise InvalidValueError(
                "Path must be a non-empty string",
                value_kind="path",
                raw=text,
                hint="Provide a valid file or directory path.",
            )
        if "\0" in text:
            raise InvalidValueError(
                "Path must not contain NUL bytes",
                value_kind="path",
                raw=text,
                hint="Provide a valid file or directory path.",
            )
        self.raw: str = text
        self.value: Path = Path(os.path.abspath(text))

    # ------------------------------------------------------------------
    # Pure views
    # ------------------------------------------------------------------

    @property
    def absolute(self) -> Path:
        return self.value

    @property
    def normalized(self) -> Path:
        return Path(os.path.normpath(self.value))

    @property
    def basename(self) -> str:
        return self.value.name

    @property
    def dirname(self) -> Path:
        return self.value.parent

    @property
    def extension(self) -> str:
        """Suffix including the dot, ``""`` when there is none."""
        return self.value.suffix

    # ------------------------------------------------------------------
    # Lazy filesystem queries
    # ------------------------------------------------------------------

    def _query(self, call: Callable[[], _T], what: str) -> _T:
        try:
            return call()
        except OSError as exc:
            raise PathAccessError(
                f"Could not check whether the path {what}: {exc.strerror or exc}",
                received=[str(self.value)],
                hint="Check the permissions of the path and its parents.",
            ) from exc

    @property
    def exists(self) -> bool:
        return self._query(self.value.exists, "exists")

    @property
    def is_file(self) -> bool:
        return self._query(self.value.is_file, "is a file")

    @property
    def is_dir(self) -> bool:
        return self._query(self.value.is_dir, "is a directory")

    def read(self, encoding: str = "utf-8") -> str:
        """Return the file's text content.

        Raises
        ------
        PathAccessError
            If the path is missing, is not a file, or cannot be decoded.
        """
        if not self.exists:
            raise PathAccessError(
                "File does not exist",
                received=[str(self.value)],
                hint="Check that the path is correct and the file exists.",
            )
        if not self.is_file:
            raise PathAccessError(
                "Path does not point to a file",
                received=[str(self.value)],
                hint="Provide a path to a readable file.",
            )
        try:
            return self.value.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise PathAccessError(
                "Failed to read file",
                received=[str(self.value)],
                hint="Check file permissions and encoding.",
            ) from exc

    # ------------------------------------------------------------------
    # Protocols
    # ------------------------------------------------------------------

    def __fspath__(self) -> str:
        return str(self.value)

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"FsPath({self.raw!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FsPath):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    @classmethod
    def is_valid(cls, value: object) -> bool:
        return isinstance(value, str) and bool(value.strip()) and "\0" not in value

    @classmethod
    def parse(cls, value: object) -> FsPath:
        if isinstance(value, FsPath):
            return value
        if isinstance(value, os.PathLike):
            return cls(os.fspath(value))
        if not isinstance(value, str):
            raise TypeError(f"Invalid FsPath value: {value!r}")
        return cls(value)
