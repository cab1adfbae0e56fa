"""Domain models for the mkly engine.

Definitions and tokens are **frozen** dataclasses. :class:`Resolution`
is the single value the resolver hands back to its caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from mkly.exceptions import InvalidDefinitionError, MklyError

if TYPE_CHECKING:
    from mkly.core.command import Command


# ---------------------------------------------------------------------------
# Value kinds
# ---------------------------------------------------------------------------

class ValueKind(str, Enum):
    """Closed set of types a positional or option value can be coerced to."""

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    CHOICE = "choice"
    PATH = "path"
    TIME = "time"
    SIZE = "size"
    JSON = "json"

    BOOLEAN_ARRAY = "booleanArray"
    STRING_ARRAY = "stringArray"
    NUMBER_ARRAY = "numberArray"
    CHOICE_ARRAY = "choiceArray"
    PATH_ARRAY = "pathArray"
    TIME_ARRAY = "timeArray"
    SIZE_ARRAY = "sizeArray"

    def __str__(self) -> str:
        return self.value

    @property
    def is_array(self) -> bool:
        return self.value.endswith("Array")

    @property
    def element(self) -> ValueKind:
        """Scalar kind of each element; the kind itself for scalars."""
        if self.is_array:
            return ValueKind(self.value.removesuffix("Array"))
        return self

    @property
    def needs_choices(self) -> bool:
        return self.element is ValueKind.CHOICE

    @classmethod
    def of(cls, value: ValueKind | str) -> ValueKind:
        """Return the member named by *value* or raise InvalidDefinitionError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidDefinitionError(
                f"Unsupported value type: {value}",
                expected=[kind.value for kind in cls],
                received=[value],
                hint=True,
            ) from None


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

def _freeze(values: Iterable[str] | str | None) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True, slots=True)
class ArgumentDef:
    """Declarative descriptor of one positional argument."""

    kind: ValueKind = ValueKind.BOOLEAN
    optional: bool = False
    default: Any = None
    """Typed or raw default; ``None`` means no default."""

    choices: tuple[str, ...] = ()
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ValueKind.of(self.kind))
        object.__setattr__(self, "choices", _freeze(self.choices))
        if self.kind.needs_choices and not self.choices:
            raise InvalidDefinitionError(
                f"Type '{self.kind}' requires a non-empty set of choices.",
                expected=["choices=[...]"],
                hint="Pass choices=('a', 'b') when declaring a choice value.",
            )

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def required(self) -> bool:
        """Neither optional nor defaulted."""
        return not self.optional and not self.has_default


@dataclass(frozen=True, slots=True)
class OptionDef(ArgumentDef):
    """Declarative descriptor of one option (flag)."""

    alias: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        ArgumentDef.__post_init__(self)
        object.__setattr__(self, "alias", _freeze(self.alias))

    @property
    def required(self) -> bool:
        # An absent boolean flag is simply off.
        if self.kind is ValueKind.BOOLEAN:
            return False
        return not self.optional and not self.has_default


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedToken:
    """Schema-independent classification of one raw argv entry."""

    original: str
    """Raw text exactly as received."""

    key: str | None = None
    """Flag name without leading dashes; ``None`` for positionals."""

    value: str | None = None
    """Inline value from ``--key=value`` / ``-k=value``."""

    is_flag: bool = False
    is_negation: bool = False
    is_end_of_flags: bool = False


# ---------------------------------------------------------------------------
# Resolution result
# ---------------------------------------------------------------------------

class ResolutionAction(str, Enum):
    """What the caller should do with a successful resolution."""

    EXECUTE = "execute"
    HELP = "help"
    VERSION = "version"


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving an argv against a command tree."""

    command: Command
    """The active (deepest matched) command node."""

    path: tuple[str, ...]
    """Command names from the root to the active node."""

    arguments: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    action: ResolutionAction = ResolutionAction.EXECUTE

    def invoke(self) -> Any:
        """Call the active command's handler with the bound values.

        Exceptions raised by the handler propagate with a note naming the
        command; a :class:`~mkly.exceptions.MklyError` is also flagged
        ``from_handler`` so callers can tell it apart from engine errors.
        """
        handler = self.command.handler
        if handler is None:
            raise RuntimeError(f"Command '{self.command.name}' has no handler.")
        try:
            return handler(self.arguments, self.options)
        except Exception as exc:
            if isinstance(exc, MklyError):
                exc.from_handler = True
            exc.add_note(f"raised by the handler of command '{' '.join(filter(None, self.path))}'")
            raise
