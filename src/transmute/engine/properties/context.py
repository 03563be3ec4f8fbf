"""Per-call cycle guard for the property flattener."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

CYCLIC_REFERENCE = "_cyclic_ref"

T = TypeVar("T")


class CyclicReferencesContext:
    """Identity set of the composites on the current recursion path.

    An object is added on entry and removed when its conversion unwinds, so
    only true cycles are reported; an object reached twice through
    independent paths is converted twice. Holds strong references to the
    visited objects, so identities cannot be reused while on the path.
    """

    def __init__(self) -> None:
        self._visiting: dict[int, Any] = {}

    def __contains__(self, obj: object) -> bool:
        return id(obj) in self._visiting

    def enter(self, obj: Any) -> bool:
        """Mark ``obj`` as visiting; False when it already is (a cycle)."""
        key = id(obj)
        if key in self._visiting:
            return False
        self._visiting[key] = obj
        return True

    def exit(self, obj: Any) -> None:
        self._visiting.pop(id(obj), None)

    def visit(self, obj: Any, convert: Callable[[], T], on_cycle: Callable[[], T]) -> T:
        """Run ``convert`` with ``obj`` on the path, or ``on_cycle`` if it already is."""
        if not self.enter(obj):
            return on_cycle()
        try:
            return convert()
        finally:
            self.exit(obj)
