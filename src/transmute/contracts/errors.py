# src/transmute/contracts/errors.py
"""Exception hierarchy for the conversion engine.

Every error raised by transmute derives from TransmuteError so callers can
catch the whole family in one place. The concrete classes map to the failure
kinds the engine distinguishes:

- ConverterUsageError: misuse, raised before any conversion work starts
- ConversionError: a field handler failed for one (source, destination) pair
- ReflectionAccessError: a member could not be read, written or constructed
- PropertyConversionError: the flattener found no strategy for a type
"""

from __future__ import annotations

from typing import Any


class TransmuteError(Exception):
    """Base class for all transmute errors."""


class ConverterUsageError(TransmuteError, ValueError):
    """Raised when a conversion entry point is called with invalid arguments.

    Covers missing required arguments (a None source or destination factory)
    and destinations that are neither a type, a parameterized alias nor a
    zero-argument factory. Never retried.
    """


class ConversionError(TransmuteError):
    """Raised when a field handler fails while converting one field pair.

    Fields converted before the failing one keep their values; there is no
    rollback. The original exception is chained as ``__cause__``.

    Attributes:
        source_field: Description of the source field reference
        destination_field: Description of the destination field reference
    """

    def __init__(
        self,
        message: str,
        *,
        source_field: Any = None,
        destination_field: Any = None,
    ) -> None:
        self.source_field = source_field
        self.destination_field = destination_field
        if source_field is not None or destination_field is not None:
            message = f"{message} src: {source_field!r} dst: {destination_field!r}"
        super().__init__(message)


class ReflectionAccessError(TransmuteError):
    """Raised when the reflection layer cannot access or construct a member.

    Attributes:
        owner: The type (or instance type) that owns the member
        member: Name of the member, or None for construction failures
    """

    def __init__(self, message: str, *, owner: type | None = None, member: str | None = None) -> None:
        self.owner = owner
        self.member = member
        super().__init__(message)


class PropertyConversionError(TransmuteError, LookupError):
    """Raised when no property conversion strategy supports a runtime type."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type
        super().__init__(f"No property conversion strategy found for type: {value_type.__qualname__}")
