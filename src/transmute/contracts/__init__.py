# src/transmute/contracts/__init__.py
"""Shared contracts: errors, handler results, field markers and inclusion policy.

This package is a leaf: nothing here depends on the conversion engine.
"""

from transmute.contracts.errors import (
    ConversionError,
    ConverterUsageError,
    PropertyConversionError,
    ReflectionAccessError,
    TransmuteError,
)
from transmute.contracts.inclusion import ExcludedFields, ExpandableFields, is_expandable
from transmute.contracts.markers import Expandable, From, Src, expandable, find_marker
from transmute.contracts.results import FieldHandlerResult
from transmute.contracts.simple_converters import SimpleConverter, SimpleConverters

__all__ = [
    "ConversionError",
    "ConverterUsageError",
    "ExcludedFields",
    "Expandable",
    "ExpandableFields",
    "FieldHandlerResult",
    "From",
    "PropertyConversionError",
    "ReflectionAccessError",
    "SimpleConverter",
    "SimpleConverters",
    "Src",
    "TransmuteError",
    "expandable",
    "find_marker",
    "is_expandable",
]
