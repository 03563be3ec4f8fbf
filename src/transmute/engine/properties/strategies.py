# src/transmute/engine/properties/strategies.py
"""Flattening strategies, tried in specificity order.

    PropertyLeafStrategy        scalars -> str
    PropertyOptionalStrategy    weakref.ref -> its referent
    PropertyMapStrategy         mappings -> dict[str, ...]
    PropertyCollectionStrategy  iterables -> list
    PropertyArrayStrategy       tuples and ndarrays -> list
    PropertyBeanStrategy        anything else -> dict of its fields
"""

from __future__ import annotations

import datetime
import enum
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import numpy as np

from transmute.engine.handlers.text import to_text
from transmute.engine.properties.context import CYCLIC_REFERENCE, CyclicReferencesContext
from transmute.reflection.extended_field import fields_of
from transmute.reflection.types import is_array_type, is_iterable_type, is_leaf_type, is_map_type

if TYPE_CHECKING:
    from transmute.engine.properties.engine import PropertyConversionEngine


def _cyclic_map(obj: Any) -> dict[str, str]:
    return {CYCLIC_REFERENCE: type(obj).__name__}


def _cyclic_list(obj: Any) -> list[str]:
    return [CYCLIC_REFERENCE]


class PropertyConversionStrategy(ABC):
    """Flattens values of the runtime classes it supports."""

    @abstractmethod
    def supports_type(self, cls: type) -> bool: ...

    @abstractmethod
    def convert(self, value: Any, engine: PropertyConversionEngine, ctx: CyclicReferencesContext) -> Any: ...


class PropertyLeafStrategy(PropertyConversionStrategy):
    def supports_type(self, cls: type) -> bool:
        return is_leaf_type(cls)

    def convert(self, value: Any, engine: PropertyConversionEngine, ctx: CyclicReferencesContext) -> Any:
        if isinstance(value, enum.Enum):
            return value.name
        if isinstance(value, bool | np.bool_):
            return "true" if value else "false"
        if isinstance(value, datetime.date | datetime.time):
            return value.isoformat()
        return to_text(value)


class PropertyOptionalStrategy(PropertyConversionStrategy):
    """Weak references flatten to their referent, or None once it is gone."""

    def supports_type(self, cls: type) -> bool:
        return issubclass(cls, weakref.ref)

    def convert(self, value: Any, engine: PropertyConversionEngine, ctx: CyclicReferencesContext) -> Any:
        return engine.convert(value(), ctx)


class PropertyMapStrategy(PropertyConversionStrategy):
    def supports_type(self, cls: type) -> bool:
        return is_map_type(cls)

    def convert(self, value: Any, engine: PropertyConversionEngine, ctx: CyclicReferencesContext) -> Any:
        return ctx.visit(
            value,
            lambda: {to_text(key): engine.convert(item, ctx) for key, item in value.items()},
            lambda: _cyclic_map(value),
        )


class PropertyCollectionStrategy(PropertyConversionStrategy):
    def supports_type(self, cls: type) -> bool:
        return is_iterable_type(cls)

    def convert(self, value: Any, engine: PropertyConversionEngine, ctx: CyclicReferencesContext) -> Any:
        return ctx.visit(value, lambda: [engine.convert(item, ctx) for item in value], lambda: _cyclic_list(value))


class PropertyArrayStrategy(PropertyConversionStrategy):
    def supports_type(self, cls: type) -> bool:
        return is_array_type(cls)

    def convert(self, value: Any, engine: PropertyConversionEngine, ctx: CyclicReferencesContext) -> Any:
        return ctx.visit(value, lambda: [engine.convert(item, ctx) for item in value], lambda: _cyclic_list(value))


class PropertyBeanStrategy(PropertyConversionStrategy):
    """Catch-all: one entry per non-static field, getter or property."""

    def supports_type(self, cls: type) -> bool:
        return True

    def convert(self, value: Any, engine: PropertyConversionEngine, ctx: CyclicReferencesContext) -> Any:
        def flatten() -> dict[str, Any]:
            return {
                field.name: engine.convert(field.value, ctx)
                for field in fields_of(value)
                if not field.is_static and field.name is not None
            }

        return ctx.visit(value, flatten, lambda: _cyclic_map(value))


DEFAULT_PROPERTY_STRATEGIES: tuple[PropertyConversionStrategy, ...] = (
    PropertyLeafStrategy(),
    PropertyOptionalStrategy(),
    PropertyMapStrategy(),
    PropertyCollectionStrategy(),
    PropertyArrayStrategy(),
    PropertyBeanStrategy(),
)
