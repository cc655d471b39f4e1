"""Embedding one builder's statement into another.

A subquery is copied into its parent once, at the moment it is embedded:
the child's raw text is taken as it is now, its slots are appended after the
parent's, and its ordinal markers are renumbered to follow the parent's
ordinals.  Named markers are copied verbatim, so a name used on both sides
binds one value to the placeholders of both.  Later changes to the child do
not reach the parent.
"""
from __future__ import annotations

import logging

from chainql.compile.parameters import ParameterTable
from chainql.compile.renderer import placeholder_pattern, replace_placeholders
from chainql.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def merge_subquery(parent: ParameterTable, child_raw: str, child: ParameterTable) -> str:
    """Move ``child``'s parameters into ``parent`` and return the rewritten text.

    Args:
        parent: The embedding builder's parameter table (mutated).
        child_raw: The child's unpretty raw statement.
        child: The child's parameter table (left unchanged).

    Returns:
        ``child_raw`` with ordinal markers renumbered for ``parent``.

    Raises:
        InvalidArgumentError: If the two tables render different markers.
    """
    if parent.settings != child.settings:
        raise InvalidArgumentError(
            "Cannot embed a subquery built with different placeholder settings."
        )

    offset = parent.absorb(child)
    if offset:
        settings = parent.settings
        pattern = placeholder_pattern(settings)

        def _renumber(token: str) -> str:
            number = pattern.ordinal_number(token)
            return token if number is None else settings.ordinal_marker(number + offset)

        child_raw = replace_placeholders(child_raw, settings, _renumber)

    logger.debug(
        "Merged subquery: %d slots, ordinal offset %d, parent now holds %d slots",
        child.slot_count,
        offset,
        parent.slot_count,
    )
    return child_raw
