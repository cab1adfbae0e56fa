"""Core engine — schema, token classification, resolution and coercion.

Rules
-----
* No ``print()`` calls.
* No filesystem I/O (paths are wrapped in lazy :class:`~mkly.values.FsPath`).
* No imports from ``cli``.
* Failures are raised as :class:`~mkly.exceptions.MklyError` subclasses.
"""

from mkly.core.coercion import coerce
from mkly.core.command import Command
from mkly.core.models import (
    ArgumentDef,
    OptionDef,
    ParsedToken,
    Resolution,
    ResolutionAction,
    ValueKind,
)
from mkly.core.resolver import resolve
from mkly.core.tokens import classify

__all__: list[str] = [
    "ArgumentDef",
    "Command",
    "OptionDef",
    "ParsedToken",
    "Resolution",
    "ResolutionAction",
    "ValueKind",
    "classify",
    "coerce",
    "resolve",
]
