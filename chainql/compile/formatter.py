"""Pure token formatting helpers.

Every function here takes strings (or values) and returns a string; nothing
touches builder state.  Rendered fragments keep a space between every
structural token (``( a , b )``, ``CAST( x AS INT )``) so the raw statement
can be split on spaces to find placeholders again.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

#: Separator between items of a parenthesised list.
LIST_DELIMITER = " , "


def escape_chars(value: str) -> str:
    """Backslash-escape backslashes and both quote characters."""
    return value.replace("\\", "\\\\").replace("'", "\\'").replace('"', '\\"')


def quote_literal(value: str) -> str:
    """Wrap ``value`` in single quotes unless it already is."""
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        return value
    return f"'{value}'"


def quote_identifier(name: str) -> str:
    """Return a double-quoted identifier.

    Already quoted names and the ``*`` wildcard are returned unchanged;
    embedded double quotes are doubled.
    """
    if name == "*" or (len(name) >= 2 and name.startswith('"') and name.endswith('"')):
        return name
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def qualify(*parts: str) -> str:
    """Join quoted identifier parts with dots: ``"schema"."table"``."""
    return ".".join(quote_identifier(p) for p in parts)


def scalar_literal(value: Any) -> str:
    """Render a Python value as an inline SQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, str):
        return quote_literal(escape_chars(value))
    return str(value)


def cast(value: str, type_: str) -> str:
    return f"CAST( {value} AS {type_} )"


def group(text: str) -> str:
    return f"( {text} )"


def group_list(items: Iterable[str]) -> str:
    """Render ``( a , b , c )``."""
    return group(LIST_DELIMITER.join(items))


def alias_prefix(expr: str, alias: str | None) -> str:
    """Render ``"alias" AS expr``, the form used by CTE definitions."""
    if not alias:
        return expr
    return f"{quote_identifier(alias)} AS {expr}"


def alias_suffix(expr: str, alias: str | None) -> str:
    """Render ``expr AS "alias"``."""
    if not alias:
        return expr
    return f"{expr} AS {quote_identifier(alias)}"


def call(name: str, args: Iterable[str]) -> str:
    """Render ``name( a , b )``; no arguments give ``name(  )``."""
    return f"{name}( {LIST_DELIMITER.join(args)} )"


def aggregate(name: str, argument: str, distinct: bool = False) -> str:
    marker = "DISTINCT " if distinct else ""
    return f"{name}( {marker}{argument} )"
