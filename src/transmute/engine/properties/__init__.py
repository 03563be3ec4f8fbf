"""Flattening arbitrary object graphs into property trees."""

from transmute.engine.properties.context import CYCLIC_REFERENCE, CyclicReferencesContext
from transmute.engine.properties.engine import PropertyConversionEngine
from transmute.engine.properties.strategies import (
    DEFAULT_PROPERTY_STRATEGIES,
    PropertyArrayStrategy,
    PropertyBeanStrategy,
    PropertyCollectionStrategy,
    PropertyConversionStrategy,
    PropertyLeafStrategy,
    PropertyMapStrategy,
    PropertyOptionalStrategy,
)

__all__ = [
    "CYCLIC_REFERENCE",
    "DEFAULT_PROPERTY_STRATEGIES",
    "CyclicReferencesContext",
    "PropertyArrayStrategy",
    "PropertyBeanStrategy",
    "PropertyCollectionStrategy",
    "PropertyConversionEngine",
    "PropertyConversionStrategy",
    "PropertyLeafStrategy",
    "PropertyMapStrategy",
    "PropertyOptionalStrategy",
]
