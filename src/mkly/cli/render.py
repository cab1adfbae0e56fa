"""Rendering of help screens and diagnostics.

Everything here formats data the engine produced; nothing here decides
what is valid. Output is built as lines of ``(text, style)`` segments
and titled two-column :class:`Section` blocks. With Rich installed each
line becomes a ``Text`` and each section a borderless ``Table.grid``;
without it the same blocks are printed as padded plain text.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from mkly.cli.console import console, error_console
from mkly.core.command import Command
from mkly.core.hints import resolve_hint
from mkly.core.models import ArgumentDef, ValueKind
from mkly.exceptions import InvalidValueError, MklyError, PathAccessError, SchemaError

Segment = tuple[str, str]
"""``(text, style)``; an empty style means unstyled."""

Line = list[Segment]

_COLUMN_GAP = 4
_INDENT = 2


@dataclass(frozen=True, slots=True)
class Section:
    """Titled block of aligned ``(left, right)`` rows."""

    title: str
    rows: list[tuple[Line, Line]] = field(default_factory=list)


Block = Line | Section


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def _text(line: Line) -> str:
    return "".join(text for text, _ in line)


def to_plain(blocks: Sequence[Block]) -> list[str]:
    """Plain-text lines for *blocks*; sections padded to their widest cell."""
    lines: list[str] = []
    for block in blocks:
        if not isinstance(block, Section):
            lines.append(_text(block))
            continue
        lines.append(f"{block.title}:")
        width = max(len(_text(left)) for left, _ in block.rows)
        for left, right in block.rows:
            cell = _text(left).ljust(width + _COLUMN_GAP)
            lines.append(f"{' ' * _INDENT}{cell}{_text(right)}".rstrip())
    return lines


def _to_rich(blocks: Sequence[Block]) -> Any:
    """Rich renderable for *blocks*; raises ``ModuleNotFoundError`` without Rich."""
    from rich.console import Group
    from rich.padding import Padding
    from rich.table import Table
    from rich.text import Text

    renderables: list[Any] = []
    for block in blocks:
        if not isinstance(block, Section):
            renderables.append(Text.assemble(*block))
            continue
        renderables.append(Text(f"{block.title}:", style="bold"))
        grid = Table.grid(padding=(0, _COLUMN_GAP))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for left, right in block.rows:
            grid.add_row(Text.assemble(*left), Text.assemble(*right))
        renderables.append(Padding(grid, (0, 0, 0, _INDENT), expand=False))
    return Group(*renderables)


def _emit(blocks: Sequence[Block], *, stderr: bool = False) -> None:
    try:
        renderable = _to_rich(blocks)
    except ModuleNotFoundError:
        print("\n".join(to_plain(blocks)), file=sys.stderr if stderr else sys.stdout)
        return
    (error_console if stderr else console).print(renderable)


def _joined(segments: Sequence[Segment], separator: str = " ") -> Line:
    line: Line = []
    for index, segment in enumerate(segments):
        if index:
            line.append((separator, ""))
        line.append(segment)
    return line


def _section(title: str, rows: list[tuple[Line, Line]]) -> list[Block]:
    if not rows:
        return []
    return [Section(title, rows), []]


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------

def _annotations(definition: ArgumentDef) -> Line:
    parts: list[Segment] = []
    if definition.description:
        parts.append((definition.description, "dim"))
    if definition.optional:
        parts.append(("[optional]", "blue"))
    if definition.has_default:
        parts.append((f"[default: {definition.default}]", "dim"))
    if definition.choices:
        parts.append((f"[choices: {', '.join(definition.choices)}]", "dim"))
    return _joined(parts)


def usage(command: Command) -> Line:
    """Usage tail: positionals in order, then an options placeholder."""
    parts: list[Segment] = [
        (f"<{name}>", "green") if argument.required else (f"[{name}]", "dim yellow")
        for name, argument in command.arguments.items()
    ]
    if command.options:
        parts.append(("...options", "dim"))
    return _joined(parts)


def format_help(command: Command, path: Sequence[str] = ()) -> list[Block]:
    """Help screen for *command*."""
    blocks: list[Block] = []
    if command.summary:
        blocks.extend([[(command.summary, "")], []])

    prefix = " ".join([name for name in path if name] or [command.name or "<command>"])
    tail = usage(command)
    blocks.append([("Usage:", "bold")])
    blocks.append([(" " * _INDENT + prefix, ""), *([(" ", "")] + tail if tail else [])])
    blocks.append([])

    arguments: list[tuple[Line, Line]] = []
    for name, argument in command.arguments.items():
        styles = ("green", "yellow") if argument.required else ("yellow", "dim")
        left: Line = [(name, styles[0]), (" ", ""), (f"<{argument.kind}>", styles[1])]
        arguments.append((left, _annotations(argument)))
    blocks.extend(_section("Arguments", arguments))

    options: list[tuple[Line, Line]] = []
    for name, option in command.options.items():
        left = _joined([(f"-{alias}", "cyan") for alias in option.alias], ", ")
        left.append((", " if option.alias else "    ", ""))
        left.append((f"--{name}", "cyan"))
        if option.kind is not ValueKind.BOOLEAN:
            left.extend([(" ", ""), (f"<{option.kind}>", "yellow")])
        options.append((left, _annotations(option)))
    blocks.extend(_section("Options", options))

    commands: list[tuple[Line, Line]] = []
    for name, child in command.commands.items():
        left = [(name, "magenta")]
        if child.aliases:
            left.append((f" ({', '.join(sorted(child.aliases))})", "dim"))
        commands.append((left, [(child.summary, "dim")] if child.summary else []))
    blocks.extend(_section("Commands", commands))

    while blocks and blocks[-1] == []:
        blocks.pop()
    return blocks


def render_help(command: Command, path: Sequence[str] = ()) -> None:
    _emit(format_help(command, path))


def render_version(name: str | None, version: str) -> None:
    label = f"{name} " if name else ""
    _emit([[(f"{label}v{version}", "green")]])


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

def _title(error: MklyError) -> str:
    if isinstance(error, InvalidValueError | PathAccessError):
        return "Parsing Error"
    if isinstance(error, SchemaError):
        return "Schema Error"
    return "Command Error"


def _quoted(values: Sequence[str], style: str) -> Line:
    return _joined([(f'"{value}"', style) for value in values], ", ")


def format_diagnostic(error: MklyError) -> list[Block]:
    """Diagnostic for *error*."""
    diagnostic = error.diagnostic
    indent: Segment = (" " * _INDENT, "")
    blocks: list[Block] = [
        [(f"✖ {_title(error)}", "bold red")],
        [(diagnostic.message, "red")],
    ]

    if diagnostic.command or diagnostic.option or diagnostic.argument:
        blocks.extend([[], [("Context:", "bold")]])
        if diagnostic.command:
            blocks.append([indent, ("Command: ", ""), (diagnostic.command, "cyan")])
        if diagnostic.option:
            blocks.append([indent, ("Option: ", ""), (f"--{diagnostic.option}", "yellow")])
        if diagnostic.argument:
            blocks.append([indent, ("Argument: ", ""), (f"<{diagnostic.argument}>", "yellow")])

    if diagnostic.expected:
        blocks.extend([[], [("Expected:", "bold")], [indent, *_quoted(diagnostic.expected, "green")]])

    if diagnostic.examples:
        examples = _joined([(example, "cyan") for example in diagnostic.examples], ", ")
        blocks.extend([[], [("Examples:", "bold")], [indent, *examples]])

    if diagnostic.received:
        received: Line = []
        for index, (value, inferred) in enumerate(zip(diagnostic.received, error.inferred_types)):
            if index:
                received.append((", ", ""))
            received.extend([(f'"{value}"', "yellow"), (" ", ""), (f"→ ({inferred})", "dim bold")])
        blocks.extend([[], [("Received:", "bold")], [indent, *received]])

    hint = resolve_hint(diagnostic.hint, diagnostic.expected, diagnostic.received)
    if hint:
        blocks.extend([[], [("Hint:", "bold")], [indent, (hint, "cyan")]])
    return blocks


def render_diagnostic(error: MklyError) -> None:
    _emit(format_diagnostic(error), stderr=True)
