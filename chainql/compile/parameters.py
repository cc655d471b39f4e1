"""Placeholder bookkeeping for one statement.

Every placeholder occurrence owns a *slot*; slots are numbered from 0 in the
order placeholders are declared.  A *reference* groups one or more slots
under the marker token the placeholder renders as:

* ordinal references (``$$1``, ``$$2`` ...) come from ``allocate()`` without
  a reference, one new ordinal per call, or from an explicit ``int`` that
  reuses an existing ordinal;
* named references (``$?tenant``) come from any other reference object and
  may be declared any number of times.

Setting a reference writes the same value into all of its slots.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from chainql.errors import (
    InvalidArgumentError,
    ParameterOverflowError,
    ReferenceNotFoundError,
)
from chainql.schema.settings import DEFAULT_SETTINGS, BuilderSettings


def is_ordinal_reference(reference: Any) -> bool:
    """``int`` references address ordinals; ``bool`` is not an ordinal."""
    return isinstance(reference, int) and not isinstance(reference, bool)


def injection_text(value: Any) -> str:
    """Return the text substituted for a placeholder holding ``value``."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class ParameterTable:
    """Slots, references and injected values of one builder.

    Args:
        settings: Marker settings used to render reference tokens.
    """

    def __init__(self, settings: BuilderSettings = DEFAULT_SETTINGS) -> None:
        self._settings = settings
        self._injections: list[str | None] = []
        self._references: dict[str, list[int]] = {}
        self._ordinal = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def settings(self) -> BuilderSettings:
        return self._settings

    @property
    def slot_count(self) -> int:
        return len(self._injections)

    @property
    def ordinal_count(self) -> int:
        """Number of ordinals handed out by reference-less declarations."""
        return self._ordinal

    @property
    def references(self) -> dict[str, list[int]]:
        """Copy of the marker-token to slot-indices mapping."""
        return {marker: list(slots) for marker, slots in self._references.items()}

    @property
    def injections(self) -> list[str | None]:
        return list(self._injections)

    def marker(self, reference: Any) -> str:
        """Return the token a reference renders as."""
        if is_ordinal_reference(reference):
            return self._settings.ordinal_marker(reference)
        return self._settings.named_marker(reference)

    def slots_for(self, reference: Any) -> list[int]:
        """Return the slot indices bound to ``reference``.

        Raises:
            ReferenceNotFoundError: If no placeholder declared ``reference``.
        """
        slots = self._references.get(self.marker(reference))
        if slots is None:
            raise ReferenceNotFoundError(reference)
        return list(slots)

    def is_bound(self, marker: str, slot: int) -> bool:
        return slot in self._references.get(marker, ())

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def allocate(self, reference: Any = None) -> str:
        """Declare one placeholder and return its marker token.

        Args:
            reference: ``None`` for the next ordinal, an ``int`` for an
                ordinal already handed out, or a name.

        Raises:
            InvalidArgumentError: If an ordinal has not been handed out yet,
                or a named reference is empty or holds whitespace, which
                would split its marker token.
        """
        self._check_reference(reference, self._ordinal)
        if reference is None:
            self._ordinal += 1
            marker = self._settings.ordinal_marker(self._ordinal)
        elif is_ordinal_reference(reference):
            marker = self._settings.ordinal_marker(reference)
        else:
            marker = self._settings.named_marker(str(reference))

        self._references.setdefault(marker, []).append(len(self._injections))
        self._injections.append(None)
        return marker

    def allocate_all(self, references: Iterable[Any]) -> list[str]:
        """Declare one placeholder per reference, all or nothing.

        Every reference is checked before the first slot is allocated, so a
        bad reference leaves the table untouched.
        """
        references = list(references)
        ordinal = self._ordinal
        for reference in references:
            self._check_reference(reference, ordinal)
            if reference is None:
                ordinal += 1
        return [self.allocate(reference) for reference in references]

    @staticmethod
    def _check_reference(reference: Any, ordinal: int) -> None:
        if reference is None:
            return
        if is_ordinal_reference(reference):
            if not 1 <= reference <= ordinal:
                raise InvalidArgumentError(
                    f"Ordinal reference {reference} has not been declared; "
                    f"ordinals 1 to {ordinal} exist."
                )
            return
        name = str(reference)
        if not name or any(ch.isspace() for ch in name):
            raise InvalidArgumentError(
                f"Named parameter reference must be non-empty without whitespace: {name!r}"
            )

    # ------------------------------------------------------------------
    # Injection
    # ------------------------------------------------------------------

    def set(self, reference: Any, value: Any) -> None:
        """Inject ``value`` into every slot bound to ``reference``."""
        text = injection_text(value)
        for slot in self.slots_for(reference):
            self._injections[slot] = text

    def set_positionally(self, *values: Any) -> None:
        """Replace all injections, assigning ``values[i]`` to slot ``i``.

        Supplying fewer values than slots leaves the remaining slots unset.

        Raises:
            ParameterOverflowError: If more values than slots are supplied;
                the current injections are kept.
        """
        if len(values) > self.slot_count:
            raise ParameterOverflowError(len(values), self.slot_count)
        self.clear()
        for i, value in enumerate(values):
            self._injections[i] = injection_text(value)

    def clear(self) -> None:
        self._injections = [None] * len(self._injections)

    # ------------------------------------------------------------------
    # Merging
    # ------------------------------------------------------------------

    def absorb(self, child: ParameterTable) -> int:
        """Append ``child``'s slots and references after this table's own.

        Ordinal references of ``child`` are renumbered after this table's
        ordinals; named references keep their name and join any reference of
        the same name here.  ``child`` is left unchanged.

        Returns:
            The ordinal offset applied to the child's ordinal markers.
        """
        slot_offset = self.slot_count
        ordinal_offset = self._ordinal
        ordinal_prefix = self._settings.ordinal_prefix

        for marker, slots in child._references.items():
            if marker.startswith(ordinal_prefix):
                marker = self._settings.ordinal_marker(
                    int(marker[len(ordinal_prefix):]) + ordinal_offset
                )
            self._references.setdefault(marker, []).extend(s + slot_offset for s in slots)

        self._injections.extend(child._injections)
        self._ordinal += child._ordinal
        return ordinal_offset
