# src/transmute/engine/properties/engine.py
"""PropertyConversionEngine: flattens object graphs into dicts, lists and strings.

The first strategy supporting a value's runtime class is cached against that
class. The cache is shared by every caller of an engine instance; a lost race
only recomputes the same answer. Cycles are reported with the ``_cyclic_ref``
sentinel, but recursion depth still follows the depth of the graph, so very
deep acyclic graphs can exceed the interpreter's recursion limit.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any

import structlog

from transmute.contracts.errors import PropertyConversionError
from transmute.engine.properties.context import CyclicReferencesContext
from transmute.engine.properties.strategies import DEFAULT_PROPERTY_STRATEGIES, PropertyConversionStrategy

log = structlog.get_logger(__name__)

_default_lock = threading.Lock()
_default: PropertyConversionEngine | None = None


class PropertyConversionEngine:
    """Strategy-dispatched recursive flattener with a per-class strategy cache."""

    def __init__(self, strategies: Sequence[PropertyConversionStrategy] = DEFAULT_PROPERTY_STRATEGIES) -> None:
        self._strategies = tuple(strategies)
        self._cache: dict[type, PropertyConversionStrategy] = {}
        self._cache_lock = threading.Lock()

    @classmethod
    def default(cls) -> PropertyConversionEngine:
        """The shared engine with the default strategy list."""
        global _default
        if _default is None:
            with _default_lock:
                if _default is None:
                    _default = cls()
        return _default

    @property
    def strategies(self) -> tuple[PropertyConversionStrategy, ...]:
        return self._strategies

    def strategy_for(self, cls: type) -> PropertyConversionStrategy:
        """The strategy used for values of runtime class ``cls``.

        Raises:
            PropertyConversionError: If no strategy supports ``cls``
        """
        strategy = self._cache.get(cls)
        if strategy is not None:
            return strategy
        for candidate in self._strategies:
            if candidate.supports_type(cls):
                log.debug("Cached property strategy", type=cls.__qualname__, strategy=type(candidate).__name__)
                with self._cache_lock:
                    return self._cache.setdefault(cls, candidate)
        raise PropertyConversionError(cls)

    def convert(self, value: Any, ctx: CyclicReferencesContext | None = None) -> Any:
        """Flatten ``value``; None stays None.

        Args:
            value: Any value
            ctx: Cycle guard of the enclosing call; a fresh one when omitted

        Returns:
            A tree of dicts, lists, strings and None
        """
        if value is None:
            return None
        if ctx is None:
            ctx = CyclicReferencesContext()
        return self.strategy_for(type(value)).convert(value, self, ctx)
