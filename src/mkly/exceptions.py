"""Custom exception hierarchy for mkly.

Every failure the engine reports inherits from :class:`MklyError`.
Errors carry structured fields rather than pre-rendered text, so the
presentation layer (``mkly.cli.render``) decides how they look and tests
can inspect them field by field.

Hierarchy
---------
MklyError
├── SchemaError
│   ├── DuplicateDefinitionError
│   ├── OrderingViolationError
│   ├── HandlerAlreadySetError
│   └── InvalidDefinitionError
├── ResolutionError
│   ├── UnknownOptionError
│   ├── UnexpectedOptionError
│   ├── UnexpectedArgumentError
│   ├── MissingOptionValueError
│   └── MissingRequiredArgumentError
├── InvalidValueError
└── PathAccessError
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar

Hint = bool | str | None
"""``None`` hides the hint, a string is shown verbatim, ``True`` asks
the renderer for a similarity-based suggestion."""


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Immutable, render-agnostic description of a single failure."""

    kind: str
    """Error kind name (e.g. ``"UnknownOption"``)."""

    message: str
    command: str | None = None
    option: str | None = None
    argument: str | None = None
    expected: tuple[str, ...] = ()
    received: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    hint: Hint = None


def _strings(values: Iterable[Any]) -> tuple[str, ...]:
    return tuple(str(value) for value in values)


class MklyError(Exception):
    """Base exception for all mkly errors.

    ``from_handler`` is set on errors that escaped a command handler, as
    opposed to errors the engine raised while resolving argv.
    """

    kind: ClassVar[str] = "Error"

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        option: str | None = None,
        argument: str | None = None,
        expected: Iterable[Any] = (),
        received: Iterable[Any] = (),
        examples: Iterable[Any] = (),
        hint: Hint = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.command: str | None = command
        self.option: str | None = option
        self.argument: str | None = argument
        self.expected: tuple[str, ...] = _strings(expected)
        self.received: tuple[str, ...] = _strings(received)
        self.examples: tuple[str, ...] = _strings(examples)
        self.hint: Hint = hint
        """Optional actionable guidance shown below the error message."""
        self.from_handler: bool = False

    @property
    def diagnostic(self) -> Diagnostic:
        """Snapshot of this error as a :class:`Diagnostic`."""
        return Diagnostic(
            kind=self.kind,
            message=self.message,
            command=self.command,
            option=self.option,
            argument=self.argument,
            expected=self.expected,
            received=self.received,
            examples=self.examples,
            hint=self.hint,
        )

    @property
    def inferred_types(self) -> tuple[str, ...]:
        """Inferred type of every received value, e.g. ``("number",)``."""
        from mkly.core.type_inference import infer_type

        return tuple(infer_type(value) for value in self.received)


# --- Schema construction ---------------------------------------------------

class SchemaError(MklyError):
    """Raised while a CLI author declares commands; aborts startup."""

    kind = "SchemaError"


class DuplicateDefinitionError(SchemaError):
    """Raised when an argument, option or subcommand name is reused."""

    kind = "DuplicateDefinition"


class OrderingViolationError(SchemaError):
    """Raised when a required positional follows an optional one."""

    kind = "OrderingViolation"


class HandlerAlreadySetError(SchemaError):
    """Raised when a command receives a second action handler."""

    kind = "HandlerAlreadySet"


class InvalidDefinitionError(SchemaError):
    """Raised when a definition is malformed (unknown kind, no choices)."""

    kind = "InvalidDefinition"


# --- Resolution ------------------------------------------------------------

class ResolutionError(MklyError):
    """Raised when an argument vector does not fit the active command."""

    kind = "ResolutionError"


class UnknownOptionError(ResolutionError):
    """Raised for a flag that names no declared option or alias."""

    kind = "UnknownOption"


class UnexpectedOptionError(ResolutionError):
    """Raised for a flag-shaped token where a value was required."""

    kind = "UnexpectedOption"


class UnexpectedArgumentError(ResolutionError):
    """Raised for a positional token with no slot left to receive it."""

    kind = "UnexpectedArgument"


class MissingOptionValueError(ResolutionError):
    """Raised when a value-taking option is the last token."""

    kind = "MissingOptionValue"


class MissingRequiredArgumentError(ResolutionError):
    """Raised when a required positional or option stays unbound."""

    kind = "MissingRequiredArgument"


# --- Values ----------------------------------------------------------------

class InvalidValueError(MklyError):
    """Raised when a raw string cannot be coerced to its declared kind."""

    kind = "InvalidValue"

    def __init__(
        self,
        message: str,
        *,
        value_kind: str | None = None,
        raw: str | None = None,
        **fields: Any,
    ) -> None:
        if raw is not None:
            fields.setdefault("received", (raw,))
        super().__init__(message, **fields)
        self.value_kind: str | None = value_kind
        self.raw: str | None = raw


class PathAccessError(MklyError):
    """Raised when a lazy filesystem query on a path value fails."""

    kind = "PathAccess"
