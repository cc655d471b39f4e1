"""Raw statement display and compilation.

The raw statement is the registry rendering with placeholder markers in
place.  Compilation splits it on single spaces, walks the tokens in order
and replaces the *n*-th placeholder token with the value of slot *n*.
Markers are matched against whole tokens outside quoted spans only, so
text such as ``'cost $$1 total'`` in a string literal or ``"a $$1"`` in an
identifier is never taken for a placeholder.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache

from chainql.compile.parameters import ParameterTable
from chainql.errors import (
    MissingInjectionValueError,
    PlaceholderOrderError,
    PositionOutOfBoundsError,
)
from chainql.schema.settings import BuilderSettings

logger = logging.getLogger(__name__)

# String literals use backslash escapes, identifiers use doubled quotes.
_QUOTED_SPAN = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:[^\"]|\"\")*\"")


@dataclass(frozen=True)
class PlaceholderPattern:
    """Whole-token matchers for the two marker kinds of one settings profile."""

    ordinal: re.Pattern[str]
    named: re.Pattern[str]

    def ordinal_number(self, token: str) -> int | None:
        match = self.ordinal.fullmatch(token)
        return int(match.group(1)) if match else None

    def is_placeholder(self, token: str) -> bool:
        return bool(self.ordinal.fullmatch(token) or self.named.fullmatch(token))


@lru_cache(maxsize=16)
def placeholder_pattern(settings: BuilderSettings) -> PlaceholderPattern:
    return PlaceholderPattern(
        ordinal=re.compile(re.escape(settings.ordinal_prefix) + r"(\d+)"),
        named=re.compile(re.escape(settings.named_prefix) + r"\S+"),
    )


def replace_placeholders(
    statement: str, settings: BuilderSettings, replace: Callable[[str], str]
) -> str:
    """Return ``statement`` with every placeholder token passed through ``replace``.

    Tokens are visited in text order.  Quoted literals and identifiers are
    copied unchanged.
    """
    pattern = placeholder_pattern(settings)

    def _scan(segment: str) -> str:
        tokens = segment.split(" ")
        for i, token in enumerate(tokens):
            if pattern.is_placeholder(token):
                tokens[i] = replace(token)
        return " ".join(tokens)

    parts: list[str] = []
    last = 0
    for match in _QUOTED_SPAN.finditer(statement):
        parts.append(_scan(statement[last:match.start()]))
        parts.append(match.group())
        last = match.end()
    parts.append(_scan(statement[last:]))
    return "".join(parts)


def prettify(statement: str, settings: BuilderSettings) -> str:
    """Return a display form of ``statement``.

    Both marker prefixes collapse to ``settings.display_marker`` and the
    padding around commas and parentheses is tightened.  The result is for
    reading only; it cannot be compiled.
    """
    return (
        statement.replace(settings.ordinal_prefix, settings.display_marker)
        .replace(settings.named_prefix, settings.display_marker)
        .replace(" , ", ", ")
        .replace("( ", "(")
        .replace(" )", ")")
    )


def compile_statement(raw: str, table: ParameterTable | None) -> str:
    """Substitute injected values for every placeholder in ``raw``.

    Args:
        raw: The unpretty raw statement.
        table: The builder's parameter table, or ``None`` if it has none.

    Returns:
        The compiled statement.

    Raises:
        PositionOutOfBoundsError: More placeholder tokens than slots.
        PlaceholderOrderError: A placeholder sits at a text position whose
            slot belongs to another reference.
        MissingInjectionValueError: A slot has no injected value.
    """
    if table is None or table.slot_count == 0:
        return raw

    settings = table.settings
    injections = table.injections
    position = -1

    def _inject(token: str) -> str:
        nonlocal position
        position += 1
        display = prettify(token, settings)
        if position >= table.slot_count:
            raise PositionOutOfBoundsError(position, table.slot_count, display)
        if not table.is_bound(token, position):
            raise PlaceholderOrderError(position, display)
        value = injections[position]
        if value is None:
            raise MissingInjectionValueError(display)
        return value

    compiled = replace_placeholders(raw, settings, _inject)
    logger.debug("Compiled statement with %d parameter slots", table.slot_count)
    return compiled
