"""Tests for the resolution engine (core/resolver.py).

Scenarios build small command trees in-process and resolve explicit
argument lists; no I/O is involved.
"""

from __future__ import annotations

from typing import Any

import pytest

from mkly.core.command import Command
from mkly.core.models import ResolutionAction
from mkly.core.resolver import descend, resolve
from mkly.exceptions import (
    InvalidValueError,
    MissingOptionValueError,
    MissingRequiredArgumentError,
    UnexpectedArgumentError,
    UnexpectedOptionError,
    UnknownOptionError,
)
from mkly.values import ByteSize, Duration


def _noop(arguments: dict[str, Any], options: dict[str, Any]) -> None:
    return None


def _remote_tree(calls: list[tuple[dict[str, Any], dict[str, Any]]]) -> Command:
    root = Command("git")
    remote = root.command("remote")
    remote.command("add").argument("name", type="string").argument("url", type="string").action(
        lambda a, o: calls.append((a, o))
    )
    return root


def _build_tree() -> Command:
    root = Command("tool")
    root.command("build").option("minify", type="boolean", alias=["m"]).option(
        "target", type="string", optional=True
    ).action(_noop)
    return root


# ---------------------------------------------------------------------------
# Descent
# ---------------------------------------------------------------------------

class TestDescent:
    def test_nested_subcommand_with_positionals(self) -> None:
        calls: list[tuple[dict[str, Any], dict[str, Any]]] = []
        resolution = resolve(_remote_tree(calls), ["remote", "add", "origin", "https://x"])
        assert resolution.action is ResolutionAction.EXECUTE
        assert resolution.path == ("git", "remote", "add")
        resolution.invoke()
        assert calls == [({"name": "origin", "url": "https://x"}, {})]

    def test_handler_invoked_once(self) -> None:
        calls: list[tuple[dict[str, Any], dict[str, Any]]] = []
        resolve(_remote_tree(calls), ["remote", "add", "origin", "https://x"]).invoke()
        assert len(calls) == 1

    def test_descent_stops_at_first_non_name(self) -> None:
        root = Command("tool")
        root.command("build")
        command, path, consumed = descend(root, ["--verbose", "build"])
        assert command is root
        assert consumed == 0
        assert path == ("tool",)

    def test_alias_does_not_descend(self) -> None:
        root = Command("tool").argument("target", type="string", optional=True).action(_noop)
        root.command("build").alias("b").action(_noop)
        resolution = resolve(root, ["b"])
        assert resolution.command is root
        assert resolution.arguments == {"target": "b"}

    def test_no_handler_means_help(self) -> None:
        calls: list[tuple[dict[str, Any], dict[str, Any]]] = []
        resolution = resolve(_remote_tree(calls), ["remote"])
        assert resolution.action is ResolutionAction.HELP
        assert resolution.command.name == "remote"


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class TestOptions:
    def test_short_alias(self) -> None:
        resolution = resolve(_build_tree(), ["build", "-m"])
        assert resolution.options["minify"] is True

    def test_missing_value_at_end(self) -> None:
        with pytest.raises(MissingOptionValueError) as exc_info:
            resolve(_build_tree(), ["build", "--target"])
        assert exc_info.value.option == "target"
        assert exc_info.value.command == "build"

    def test_inline_and_separate_values_equivalent(self) -> None:
        inline = resolve(_build_tree(), ["build", "--target=web"])
        separate = resolve(_build_tree(), ["build", "--target", "web"])
        assert inline.options == separate.options == {"minify": False, "target": "web"}

    def test_short_alias_with_inline_value(self) -> None:
        root = Command("serve").option("port", type="number", alias=["p"]).action(_noop)
        assert resolve(root, ["-p=8080"]).options["port"] == 8080

    def test_value_keeps_equals_signs(self) -> None:
        root = Command("env").option("set", type="string").action(_noop)
        assert resolve(root, ["--set=A=B"]).options["set"] == "A=B"

    def test_value_may_look_like_flag(self) -> None:
        assert resolve(_build_tree(), ["build", "--target", "--minify"]).options["target"] == "--minify"

    def test_last_occurrence_wins(self) -> None:
        resolution = resolve(_build_tree(), ["build", "--target", "a", "--target", "b"])
        assert resolution.options["target"] == "b"

    def test_negation(self) -> None:
        root = Command("x").option("color", type="boolean", default=True).action(_noop)
        assert resolve(root, []).options["color"] is True
        assert resolve(root, ["--no-color"]).options["color"] is False

    def test_inline_boolean_value(self) -> None:
        assert resolve(_build_tree(), ["build", "--minify=off"]).options["minify"] is False

    def test_negating_value_option_fails(self) -> None:
        with pytest.raises(UnexpectedOptionError):
            resolve(_build_tree(), ["build", "--no-target"])

    def test_literal_no_prefixed_option(self) -> None:
        root = Command("x").option("no-cache", type="boolean").action(_noop)
        assert resolve(root, ["--no-cache"]).options["no-cache"] is True

    def test_unknown_option_suggests_closest(self) -> None:
        with pytest.raises(UnknownOptionError) as exc_info:
            resolve(_build_tree(), ["build", "--minfy"])
        err = exc_info.value
        assert err.hint is True
        assert err.expected == ("minify", "target")
        assert err.received == ("minfy",)

    def test_option_on_command_without_options(self) -> None:
        root = Command("x").action(_noop)
        with pytest.raises(UnknownOptionError) as exc_info:
            resolve(root, ["--verbose"])
        assert exc_info.value.hint == "This command does not accept any options."

    def test_absent_boolean_defaults_false(self) -> None:
        assert resolve(_build_tree(), ["build"]).options == {"minify": False}

    def test_required_option_missing(self) -> None:
        root = Command("deploy").option("env", type="string").action(_noop)
        with pytest.raises(MissingRequiredArgumentError) as exc_info:
            resolve(root, [])
        assert exc_info.value.option == "env"


# ---------------------------------------------------------------------------
# Positionals
# ---------------------------------------------------------------------------

class TestPositionals:
    def test_required_positional_rejects_flag(self) -> None:
        root = Command("cp").argument("source", type="string").option("force", type="boolean").action(_noop)
        with pytest.raises(UnexpectedOptionError) as exc_info:
            resolve(root, ["--force"])
        assert exc_info.value.argument == "source"

    def test_optional_positional_lets_flag_through(self) -> None:
        root = (
            Command("ls")
            .argument("dir", type="string", optional=True)
            .option("all", type="boolean")
            .action(_noop)
        )
        resolution = resolve(root, ["--all", "src"])
        assert resolution.options == {"all": True}
        assert resolution.arguments == {"dir": "src"}

    def test_missing_required_positional(self) -> None:
        root = Command("cat").argument("file", type="string").action(_noop)
        with pytest.raises(MissingRequiredArgumentError) as exc_info:
            resolve(root, [])
        assert exc_info.value.argument == "file"

    def test_extra_positional(self) -> None:
        root = Command("cat").argument("file", type="string").action(_noop)
        with pytest.raises(UnexpectedArgumentError) as exc_info:
            resolve(root, ["a.txt", "b.txt"])
        assert exc_info.value.argument == "b.txt"

    def test_positional_on_command_without_arguments(self) -> None:
        with pytest.raises(UnexpectedArgumentError) as exc_info:
            resolve(_build_tree(), ["build", "extra"])
        assert exc_info.value.hint == "This command does not accept positional arguments."

    def test_negative_number_is_flag_shaped(self) -> None:
        root = Command("calc").argument("n", type="number").action(_noop)
        with pytest.raises(UnexpectedOptionError):
            resolve(root, ["-5"])

    def test_negative_number_after_separator(self) -> None:
        root = Command("calc").argument("n", type="number").action(_noop)
        assert resolve(root, ["--", "-5"]).arguments == {"n": -5}

    def test_negative_number_as_option_value(self) -> None:
        root = Command("calc").option("offset", type="number").action(_noop)
        assert resolve(root, ["--offset=-5"]).options == {"offset": -5}
        assert resolve(root, ["--offset", "-5"]).options == {"offset": -5}

    def test_defaults_bound(self) -> None:
        root = (
            Command("serve")
            .argument("host", type="string", default="localhost")
            .option("port", type="number", default="3000")
            .option("timeout", type="time", default="30s")
            .option("limit", type="size", default=ByteSize("1mb"))
            .action(_noop)
        )
        resolution = resolve(root, [])
        assert resolution.arguments == {"host": "localhost"}
        assert resolution.options["port"] == 3000
        assert resolution.options["timeout"] == Duration("30s")
        assert resolution.options["limit"].megabytes == 1

    def test_optional_positional_without_default_is_absent(self) -> None:
        root = Command("ls").argument("dir", type="string", optional=True).action(_noop)
        assert resolve(root, []).arguments == {}


class TestAmbiguity:
    def test_required_positional_without_options_rejects_flag(self) -> None:
        root = Command("echo").argument("text", type="string").action(_noop)
        with pytest.raises(UnexpectedOptionError) as exc_info:
            resolve(root, ["--x"])
        assert exc_info.value.argument == "text"

    def test_defaulted_positional_without_options_yields_to_flag(self) -> None:
        root = Command("echo").argument("text", type="string", optional=True, default="hi").action(_noop)
        with pytest.raises(UnknownOptionError) as exc_info:
            resolve(root, ["--x"])
        assert exc_info.value.option == "x"

    def test_defaulted_positional_keeps_default(self) -> None:
        root = (
            Command("echo")
            .argument("text", type="string", optional=True, default="hi")
            .option("x", type="boolean")
            .action(_noop)
        )
        resolution = resolve(root, ["--x"])
        assert resolution.arguments == {"text": "hi"}
        assert resolution.options == {"x": True}


# ---------------------------------------------------------------------------
# End of flags and reserved flags
# ---------------------------------------------------------------------------

class TestEndOfFlags:
    def test_flag_shaped_values_after_separator(self) -> None:
        root = (
            Command("run")
            .argument("first", type="string")
            .argument("second", type="string", optional=True)
            .action(_noop)
        )
        resolution = resolve(root, ["--", "--help", "-v"])
        assert resolution.action is ResolutionAction.EXECUTE
        assert resolution.arguments == {"first": "--help", "second": "-v"}

    def test_second_separator_is_positional(self) -> None:
        root = Command("run").argument("arg", type="string").action(_noop)
        assert resolve(root, ["--", "--"]).arguments == {"arg": "--"}

    def test_separator_alone_is_ignored(self) -> None:
        assert resolve(_build_tree(), ["build", "--"]).action is ResolutionAction.EXECUTE


class TestReservedFlags:
    @pytest.mark.parametrize("flag", ["--help", "-h"])
    def test_help(self, flag: str) -> None:
        resolution = resolve(_build_tree(), ["build", flag])
        assert resolution.action is ResolutionAction.HELP
        assert resolution.command.name == "build"

    @pytest.mark.parametrize("flag", ["--version", "-v"])
    def test_version(self, flag: str) -> None:
        assert resolve(_build_tree(), [flag]).action is ResolutionAction.VERSION

    def test_help_short_circuits_errors_after_it(self) -> None:
        root = Command("cat").argument("file", type="string").action(_noop)
        assert resolve(root, ["--help"]).action is ResolutionAction.HELP

    def test_errors_before_help_win(self) -> None:
        with pytest.raises(UnknownOptionError):
            resolve(_build_tree(), ["build", "--nope", "--help"])


# ---------------------------------------------------------------------------
# Coercion through resolution
# ---------------------------------------------------------------------------

class TestCoercionContext:
    @pytest.mark.parametrize("raw", ["1,2,3", "[1, 2, 3]"])
    def test_number_array(self, raw: str) -> None:
        root = Command("sum").option("values", type="numberArray").action(_noop)
        assert resolve(root, ["--values", raw]).options["values"] == [1, 2, 3]

    def test_invalid_choice_names_option(self) -> None:
        root = Command("deploy").option("env", type="choice", choices=["dev", "prod"]).action(_noop)
        with pytest.raises(InvalidValueError) as exc_info:
            resolve(root, ["--env", "staging"])
        err = exc_info.value
        assert err.option == "env"
        assert err.command == "deploy"
        assert err.expected == ("dev", "prod")

    def test_invalid_positional_names_argument(self) -> None:
        root = Command("sleep").argument("duration", type="time").action(_noop)
        with pytest.raises(InvalidValueError) as exc_info:
            resolve(root, ["soon"])
        assert exc_info.value.argument == "duration"

    def test_json_option(self) -> None:
        root = Command("x").option("config", type="json").action(_noop)
        assert resolve(root, ["--config", "{ debug: true }"]).options["config"] == {"debug": True}
