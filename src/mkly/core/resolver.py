"""Resolution engine: match an argv against a command tree.

Algorithm
---------
1. **Descent** — consume leading tokens that name a subcommand of the
   current node. The deepest node reached is the *active command*.
2. **Scan** — walk the remaining tokens left to right with a positional
   cursor and an end-of-flags switch, binding positionals and options.
   ``--version``/``-v`` and ``--help``/``-h`` short-circuit.
3. **Defaults** — bind declared defaults for anything left unbound.
4. **Required check** — anything still unbound and required fails.

The first failure wins; nothing is aggregated. Tie-breaks: a pending
positional takes any token that is not flag-shaped; a required
positional never yields to a flag-shaped token; an optional positional
lets a flag-shaped token through to option handling.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from mkly.core.coercion import coerce, coerce_default
from mkly.core.command import Command
from mkly.core.models import (
    ArgumentDef,
    OptionDef,
    ParsedToken,
    Resolution,
    ResolutionAction,
    ValueKind,
)
from mkly.core.tokens import classify, display_name
from mkly.exceptions import (
    InvalidValueError,
    MissingOptionValueError,
    MissingRequiredArgumentError,
    UnexpectedArgumentError,
    UnexpectedOptionError,
    UnknownOptionError,
)
from mkly.utils.constants import HELP_KEYS, VERSION_KEYS

logger = logging.getLogger(__name__)


def descend(root: Command, tokens: Sequence[str]) -> tuple[Command, tuple[str, ...], int]:
    """Follow exact subcommand names; return node, path and tokens used."""
    command = root
    path = [root.name or ""]
    consumed = 0
    while consumed < len(tokens):
        child = command.commands.get(tokens[consumed])
        if child is None:
            break
        command = child
        path.append(tokens[consumed])
        consumed += 1
    logger.debug("Active command %r after consuming %d token(s)", command.name, consumed)
    return command, tuple(path), consumed


class _Scan:
    """State of one left-to-right pass over the tokens of one command."""

    def __init__(self, command: Command, tokens: Sequence[str]) -> None:
        self.command = command
        self.tokens = tokens
        self.positionals: list[tuple[str, ArgumentDef]] = list(command.arguments.items())
        self.position = 0
        self.end_of_flags = False
        self.arguments: dict[str, Any] = {}
        self.options: dict[str, Any] = {}

    def run(self) -> ResolutionAction | None:
        """Bind every token; return a short-circuit action if one fired."""
        index = 0
        while index < len(self.tokens):
            token = classify(self.tokens[index])

            if token.is_flag and not self.end_of_flags:
                if token.key in VERSION_KEYS:
                    return ResolutionAction.VERSION
                if token.key in HELP_KEYS:
                    return ResolutionAction.HELP

            if token.is_end_of_flags and not self.end_of_flags:
                self.end_of_flags = True
                index += 1
                continue

            flag_shaped = token.is_flag and not self.end_of_flags

            if self.position < len(self.positionals):
                name, argument = self.positionals[self.position]
                if not flag_shaped:
                    self.arguments[name] = self._coerce(argument, token.original, argument=name)
                    self.position += 1
                    index += 1
                    continue
                if argument.required:
                    raise UnexpectedOptionError(
                        f'Expected argument <{name}>, but received option "{token.original}"',
                        command=self.command.name,
                        option=display_name(token),
                        argument=name,
                        hint="This is a positional argument, not an option.",
                    )

            if flag_shaped:
                index += self._bind_option(token, index)
                continue

            if not self.command.arguments:
                hint = "This command does not accept positional arguments."
            else:
                hint = "No more positional arguments are defined for this command."
            raise UnexpectedArgumentError(
                f"Unexpected argument: {token.original}",
                command=self.command.name,
                argument=token.original,
                hint=hint,
            )
        return None

    def _coerce(
        self,
        definition: ArgumentDef,
        raw: str,
        *,
        argument: str | None = None,
        option: str | None = None,
    ) -> Any:
        """Coerce *raw*, attaching command context to any failure."""
        try:
            return coerce(definition.kind, raw, definition.choices)
        except InvalidValueError as exc:
            exc.command = exc.command or self.command.name
            exc.argument = exc.argument or argument
            exc.option = exc.option or option
            raise

    def _bind_option(self, token: ParsedToken, index: int) -> int:
        """Bind one option; return how many tokens it consumed."""
        name, option, negated = self._lookup(token)

        if option.kind is ValueKind.BOOLEAN:
            if token.value is not None:
                self.options[name] = self._coerce(option, token.value, option=name)
            else:
                self.options[name] = not negated
            return 1

        if negated:
            raise UnexpectedOptionError(
                f'Option "--{name}" cannot be negated.',
                command=self.command.name,
                option=name,
                expected=[f"--{name} <{option.kind}>"],
                hint="Only boolean options accept the --no- prefix.",
            )

        if token.value is not None:
            self.options[name] = self._coerce(option, token.value, option=name)
            return 1

        if index + 1 >= len(self.tokens):
            raise MissingOptionValueError(
                f'Option "--{name}" expects a value',
                command=self.command.name,
                option=name,
                expected=[str(option.kind)],
                hint="This option requires a value.",
            )
        self.options[name] = self._coerce(option, self.tokens[index + 1], option=name)
        return 2

    def _lookup(self, token: ParsedToken) -> tuple[str, OptionDef, bool]:
        """Canonical name, definition, and whether the flag was negated."""
        key = token.key or ""
        if not self.command.options:
            raise UnknownOptionError(
                f"Unknown option: {token.original}",
                command=self.command.name,
                option=display_name(token),
                hint="This command does not accept any options.",
            )
        found = self.command.find_option(key)
        negated = token.is_negation
        if found is None and negated:
            # An option literally named "no-..." is not a negation.
            found = self.command.find_option(f"no-{key}")
            negated = False
        if found is None:
            raise UnknownOptionError(
                f"Unknown option: {token.original}",
                command=self.command.name,
                option=display_name(token),
                expected=sorted(self.command.options),
                received=[key],
                hint=True,
            )
        return found[0], found[1], negated


def _apply_defaults(command: Command, arguments: dict[str, Any], options: dict[str, Any]) -> None:
    for name, argument in command.arguments.items():
        if name not in arguments and argument.has_default:
            arguments[name] = coerce_default(argument.kind, argument.default, argument.choices)
            logger.debug("Defaulted argument <%s> to %r", name, arguments[name])
    for name, option in command.options.items():
        if name in options:
            continue
        if option.has_default:
            options[name] = coerce_default(option.kind, option.default, option.choices)
            logger.debug("Defaulted option --%s to %r", name, options[name])
        elif option.kind is ValueKind.BOOLEAN:
            options[name] = False


def _check_required(command: Command, arguments: dict[str, Any], options: dict[str, Any]) -> None:
    for name, argument in command.arguments.items():
        if argument.required and name not in arguments:
            raise MissingRequiredArgumentError(
                f"Missing required argument: <{name}>",
                command=command.name,
                argument=name,
                hint="This argument is required.",
            )
    for name, option in command.options.items():
        if option.required and name not in options:
            raise MissingRequiredArgumentError(
                f"Missing required option: --{name}",
                command=command.name,
                option=name,
                expected=[f"--{name} <{option.kind}>"],
                hint="This option is required.",
            )


def resolve(root: Command, argv: Sequence[str]) -> Resolution:
    """Resolve *argv* against the tree rooted at *root*.

    *argv* must already be free of interpreter and script entries.

    Returns
    -------
    Resolution
        ``action`` is ``VERSION`` or ``HELP`` when a reserved flag
        short-circuited, ``HELP`` when the active command has no
        handler, and ``EXECUTE`` otherwise.

    Raises
    ------
    ResolutionError
        For tokens that do not fit the active command's schema.
    InvalidValueError
        For values that cannot be coerced to their declared kind.
    """
    command, path, consumed = descend(root, argv)
    scan = _Scan(command, argv[consumed:])

    shortcut = scan.run()
    if shortcut is not None:
        logger.debug("Short-circuit %s on %r", shortcut.value, command.name)
        return Resolution(command=command, path=path, action=shortcut)

    _apply_defaults(command, scan.arguments, scan.options)
    _check_required(command, scan.arguments, scan.options)

    action = ResolutionAction.EXECUTE if command.handler is not None else ResolutionAction.HELP
    return Resolution(
        command=command,
        path=path,
        arguments=scan.arguments,
        options=scan.options,
        action=action,
    )
