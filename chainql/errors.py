"""Custom exception hierarchy for chainQL.

All public errors inherit from ChainQLError so callers can catch the base
class for any chainQL-specific failure.
"""
from __future__ import annotations

from typing import Any


class ChainQLError(Exception):
    """Base exception for all chainQL errors."""


class BuilderStateError(ChainQLError):
    """Raised when a fragment is appended to a clause that is not open.

    Args:
        message: Human-readable description.
        clause: Name of the clause the fragment was aimed at, if any.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class InvalidArgumentError(ChainQLError):
    """Raised when a builder method receives an unusable argument."""


class ParameterError(ChainQLError):
    """Base for errors raised by the parameter table.

    Args:
        message: Human-readable description.
        reference: The parameter reference involved, if any.
    """

    def __init__(self, message: str, reference: Any = None) -> None:
        super().__init__(message)
        self.reference = reference


class ReferenceNotFoundError(ParameterError):
    """Raised when a value is set for a reference no placeholder declared."""

    def __init__(self, reference: Any) -> None:
        super().__init__(
            f"No parameter found with reference: {reference!r}",
            reference=reference,
        )


class ParameterOverflowError(ParameterError):
    """Raised when more positional values are supplied than there are slots."""

    def __init__(self, supplied: int, slot_count: int) -> None:
        super().__init__(
            f"Received {supplied} positional values for {slot_count} parameter slots."
        )
        self.supplied = supplied
        self.slot_count = slot_count


class CompilationError(ChainQLError):
    """Raised when the raw statement cannot be compiled.

    Args:
        message: Human-readable description.
        placeholder: Display form of the offending placeholder, if any.
    """

    def __init__(self, message: str, placeholder: str | None = None) -> None:
        super().__init__(message)
        self.placeholder = placeholder


class PositionOutOfBoundsError(CompilationError):
    """Raised when the statement holds more placeholders than declared slots."""

    def __init__(self, position: int, slot_count: int, placeholder: str) -> None:
        super().__init__(
            f"Parameter injection position {position} out of bounds with size {slot_count}",
            placeholder=placeholder,
        )
        self.position = position
        self.slot_count = slot_count


class MissingInjectionValueError(CompilationError):
    """Raised when a placeholder is reached whose slot has no value."""

    def __init__(self, placeholder: str) -> None:
        super().__init__(
            f"No injection value found for parameter {placeholder}",
            placeholder=placeholder,
        )


class PlaceholderOrderError(CompilationError):
    """Raised when a placeholder's text position does not match its slot.

    Slots are numbered in call order while substitution walks the rendered
    text, so placeholders added to a clause that renders before an earlier
    placeholder's clause cannot be compiled.
    """

    def __init__(self, position: int, placeholder: str) -> None:
        super().__init__(
            f"Placeholder {placeholder} at position {position} is not bound to slot "
            f"{position}; placeholders must be declared in statement order.",
            placeholder=placeholder,
        )
        self.position = position
