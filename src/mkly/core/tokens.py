"""Token classifier: raw argv entry -> :class:`ParsedToken`.

Classification ignores any command schema, so the same function serves
every depth of subcommand resolution. It never raises; text that does
not look like a flag is a positional token.

Order (first match wins):

1. ``--``             end-of-flags marker
2. ``--no-key``       negated long flag
3. ``--key=value``    long flag with inline value (value is the greedy tail)
4. ``--key``          long flag
5. ``-k=value``       short alias with inline value
6. ``-k``             short alias
7. anything else      positional
"""

from __future__ import annotations

from mkly.core.models import ParsedToken
from mkly.utils.constants import (
    END_OF_FLAGS,
    NEGATION_PREFIX,
    SHORT_ALIAS,
    SHORT_ALIAS_WITH_VALUE,
)


def classify(raw: str) -> ParsedToken:
    """Classify a single raw token."""
    text = raw.strip()

    if text == END_OF_FLAGS:
        return ParsedToken(original=raw, is_end_of_flags=True)

    if text.startswith(NEGATION_PREFIX):
        return ParsedToken(
            original=raw,
            key=text[len(NEGATION_PREFIX):],
            is_flag=True,
            is_negation=True,
        )

    if text.startswith("--"):
        key, sep, value = text[2:].partition("=")
        return ParsedToken(
            original=raw,
            key=key,
            value=value if sep else None,
            is_flag=True,
        )

    match = SHORT_ALIAS_WITH_VALUE.match(text)
    if match:
        return ParsedToken(
            original=raw,
            key=match.group(1),
            value=match.group(2),
            is_flag=True,
        )

    match = SHORT_ALIAS.match(text)
    if match:
        return ParsedToken(original=raw, key=match.group(1), is_flag=True)

    return ParsedToken(original=raw)


def display_name(token: ParsedToken) -> str:
    """Flag text without leading dashes, for diagnostics."""
    return token.original.strip().lstrip("-")
