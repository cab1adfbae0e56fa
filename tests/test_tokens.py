"""Tests for the token classifier (core/tokens.py).

Classification is schema-independent and total: every input yields a
token, nothing raises.
"""

from __future__ import annotations

import pytest

from mkly.core.models import ParsedToken
from mkly.core.tokens import classify, display_name


class TestEndOfFlags:
    def test_double_dash(self) -> None:
        token = classify("--")
        assert token.is_end_of_flags
        assert not token.is_flag
        assert token.key is None

    def test_surrounding_whitespace_ignored(self) -> None:
        assert classify(" -- ").is_end_of_flags


class TestLongFlags:
    def test_negation(self) -> None:
        token = classify("--no-cache")
        assert token.is_flag
        assert token.is_negation
        assert token.key == "cache"
        assert token.value is None

    def test_inline_value(self) -> None:
        token = classify("--port=3000")
        assert token == ParsedToken(original="--port=3000", key="port", value="3000", is_flag=True)

    def test_inline_value_keeps_later_equals(self) -> None:
        token = classify("--define=a=b")
        assert token.key == "define"
        assert token.value == "a=b"

    def test_inline_empty_value(self) -> None:
        token = classify("--name=")
        assert token.key == "name"
        assert token.value == ""

    def test_plain_long_flag(self) -> None:
        token = classify("--verbose")
        assert token.is_flag
        assert token.key == "verbose"
        assert token.value is None
        assert not token.is_negation


class TestShortFlags:
    def test_short_with_value(self) -> None:
        token = classify("-o=out.txt")
        assert token.is_flag
        assert token.key == "o"
        assert token.value == "out.txt"

    def test_digit_alias_with_value(self) -> None:
        token = classify("-1=x")
        assert token.key == "1"
        assert token.value == "x"

    @pytest.mark.parametrize("raw, key", [("-m", "m"), ("-x123", "x123"), ("-out", "out"), ("-5", "5")])
    def test_short_alias(self, raw: str, key: str) -> None:
        token = classify(raw)
        assert token.is_flag
        assert token.key == key
        assert token.value is None


class TestPositionals:
    @pytest.mark.parametrize("raw", ["origin", "https://example.com", "-", "-3.14", "a=b", ""])
    def test_fallback_is_positional(self, raw: str) -> None:
        token = classify(raw)
        assert not token.is_flag
        assert not token.is_end_of_flags
        assert token.key is None

    def test_original_preserved_verbatim(self) -> None:
        assert classify("  spaced value ").original == "  spaced value "
        assert classify(" --x ").original == " --x "


class TestDisplayName:
    def test_strips_dashes(self) -> None:
        assert display_name(classify("--verbose")) == "verbose"
        assert display_name(classify("-v")) == "v"
