"""Outcome of running a single field handler."""

from enum import Enum


class FieldHandlerResult(Enum):
    """Tri-state result of a field handler.

    CONVERTED and BREAK both stop the handler chain. BREAK means the handler
    matched but deliberately left the destination alone (a None source, an
    excluded field). SKIP passes the field pair to the next handler.
    """

    CONVERTED = "converted"
    SKIP = "skip"
    BREAK = "break"

    @property
    def is_handled(self) -> bool:
        """True when the chain must stop at this result."""
        return self is not FieldHandlerResult.SKIP
