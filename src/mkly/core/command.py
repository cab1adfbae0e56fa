"""Command tree: the schema a CLI author declares before any parsing.

A :class:`Command` owns its positional definitions (in matching order),
its option definitions, and its subcommands. Nodes never point back at
their parent; resolution only ever descends.

Build-then-freeze discipline
----------------------------
Every mutating method is an author-time operation and validates its
invariant immediately, raising a :class:`~mkly.exceptions.SchemaError`
subclass. Once resolution starts the tree must no longer change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from mkly.core.models import ArgumentDef, OptionDef, ValueKind
from mkly.exceptions import (
    DuplicateDefinitionError,
    HandlerAlreadySetError,
    OrderingViolationError,
)

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any], dict[str, Any]], Any]
_Def = TypeVar("_Def", ArgumentDef, OptionDef)


def _build(cls: type[_Def], definition: _Def | None, config: dict[str, Any]) -> _Def:
    if definition is not None:
        return definition
    if "type" in config:
        config["kind"] = ValueKind.of(config.pop("type"))
    return cls(**config)


class Command:
    """One command or subcommand in the tree.

    Parameters
    ----------
    name:
        Command name. Subcommands receive theirs from :meth:`command`.
    """

    def __init__(self, name: str | None = None) -> None:
        self.name: str | None = name
        self.summary: str | None = None
        self.aliases: set[str] = set()
        self.arguments: dict[str, ArgumentDef] = {}
        self.options: dict[str, OptionDef] = {}
        self.commands: dict[str, Command] = {}
        self.handler: Handler | None = None

    def __repr__(self) -> str:
        return f"Command({self.name!r})"

    # ------------------------------------------------------------------
    # Declaration API
    # ------------------------------------------------------------------

    def option(self, name: str, definition: OptionDef | None = None, /, **config: Any) -> Command:
        """Declare an option (``--name``).

        Either pass an :class:`OptionDef` or its fields as keyword
        arguments (``type`` is accepted for ``kind``).

        Raises
        ------
        DuplicateDefinitionError
            If *name* or one of its aliases is already used by an option
            of this command.
        """
        option = _build(OptionDef, definition, config)
        taken = self._option_names()
        clashes = [key for key in (name, *option.alias) if key in taken]
        if clashes:
            raise DuplicateDefinitionError(
                f'Option "--{clashes[0]}" is already defined.',
                command=self.name,
                option=clashes[0],
                hint="Each option must have a unique name within the same command.",
            )
        self.options[name] = option
        logger.debug("Registered option --%s (%s) on %r", name, option.kind, self.name)
        return self

    def argument(self, name: str, definition: ArgumentDef | None = None, /, **config: Any) -> Command:
        """Declare the next positional argument.

        Raises
        ------
        DuplicateDefinitionError
            If *name* is already a positional of this command.
        OrderingViolationError
            If a required positional follows an optional or defaulted one.
        """
        argument = _build(ArgumentDef, definition, config)
        if name in self.arguments:
            label = f"[{name}]" if argument.optional else f"<{name}>"
            raise DuplicateDefinitionError(
                f"Argument {label} is already defined on this command.",
                command=self.name,
                argument=name,
                hint="Each argument must have a unique name within the same command.",
            )
        if argument.required and any(not prior.required for prior in self.arguments.values()):
            raise OrderingViolationError(
                f'Cannot define required argument "{name}" after an optional argument.',
                command=self.name,
                argument=name,
                hint="All required arguments must be defined before any optional arguments.",
            )
        self.arguments[name] = argument
        logger.debug("Registered argument <%s> (%s) on %r", name, argument.kind, self.name)
        return self

    def command(self, name: str, node: Command | None = None) -> Command:
        """Register a subcommand and return it for fluent chaining.

        Raises
        ------
        DuplicateDefinitionError
            If a subcommand called *name* already exists.
        """
        if name in self.commands:
            raise DuplicateDefinitionError(
                f'Command "{name}" already exists.',
                command=self.name,
                received=[name],
                hint="Each sub-command must have a unique name within the same command.",
            )
        child = node if node is not None else Command()
        child.name = name
        self.commands[name] = child
        logger.debug("Registered subcommand %r under %r", name, self.name)
        return child

    def alias(self, *names: str) -> Command:
        """Record alternative names. Descent matches exact names only."""
        self.aliases.update(names)
        return self

    def description(self, text: str) -> Command:
        self.summary = text
        return self

    def action(self, handler: Handler) -> Command:
        """Attach the handler called with ``(arguments, options)``.

        Raises
        ------
        HandlerAlreadySetError
            If this command already has a handler.
        """
        if self.handler is not None:
            raise HandlerAlreadySetError(
                "This command already has an action handler defined.",
                command=self.name,
                hint="Each command can only have one action handler.",
            )
        self.handler = handler
        return self

    # ------------------------------------------------------------------
    # Lookup (used during resolution)
    # ------------------------------------------------------------------

    def _option_names(self) -> set[str]:
        names = set(self.options)
        for option in self.options.values():
            names.update(option.alias)
        return names

    def find_option(self, key: str) -> tuple[str, OptionDef] | None:
        """Return ``(canonical_name, definition)`` for a name or alias."""
        option = self.options.get(key)
        if option is not None:
            return key, option
        for name, candidate in self.options.items():
            if key in candidate.alias:
                return name, candidate
        return None
