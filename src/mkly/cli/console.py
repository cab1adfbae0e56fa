"""CLI console helpers with optional Rich support.

Callers pass Rich markup strings or Rich renderables. When Rich cannot
be imported the proxies strip markup from strings and fall back to
plain ``print``.
"""

from __future__ import annotations

import re
import sys
from typing import Any

_STYLE_TAG = re.compile(r"(?<!\\)\[/?[a-z][a-z ]*\]")


def _strip_markup(text: str) -> str:
	"""Plain-text form of a markup string, for the no-Rich fallback."""
	return _STYLE_TAG.sub("", text).replace(r"\[", "[")


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` or raise ``ModuleNotFoundError``."""
	from rich.console import Console

	return Console


def get_rich_console(*, stderr: bool = False) -> Any:
	"""Create a Rich console bound to the current stdout or stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr, highlight=False, soft_wrap=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain print."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except ModuleNotFoundError:
			stream = sys.stderr if self._stderr else sys.stdout
			print(*(_strip_markup(str(obj)) for obj in objects), file=stream)
			return
		rich_console.print(*objects)


console = _ConsoleProxy(stderr=False)
"""Regular output: help and version."""

error_console = _ConsoleProxy(stderr=True)
"""Diagnostics."""
