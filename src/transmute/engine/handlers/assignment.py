# src/transmute/engine/handlers/assignment.py
"""Assignment handlers: same type, NumPy scalar/builtin bridging, numeric widening."""

from __future__ import annotations

import numbers
from decimal import Decimal
from fractions import Fraction
from typing import Any

import numpy as np

from transmute.contracts.results import FieldHandlerResult
from transmute.engine.field_handler import FieldHandler, FieldHandlerContext
from transmute.reflection.extended_field import ExtendedField
from transmute.reflection.types import is_array_type, is_iterable_type, is_map_type, is_parameterized

# NumPy scalar families and the builtin each one boxes to.
_NUMPY_BUILTINS: tuple[tuple[type, type], ...] = (
    (np.bool_, bool),
    (np.integer, int),
    (np.floating, float),
    (np.complexfloating, complex),
    (np.str_, str),
    (np.bytes_, bytes),
)

# (source kind, destination kind) pairs that convert without losing information.
_WIDENING: frozenset[tuple[type, type]] = frozenset(
    {
        (int, float),
        (int, complex),
        (int, Decimal),
        (int, Fraction),
        (Fraction, float),
        (Fraction, complex),
        (float, complex),
    }
)


def builtin_of(cls: type) -> type | None:
    """The builtin type a NumPy scalar class corresponds to."""
    for numpy_type, builtin in _NUMPY_BUILTINS:
        if issubclass(cls, numpy_type):
            return builtin
    return None


def numeric_kind(cls: type) -> type | None:
    """Classify a number class onto the numeric tower: int, Fraction, Decimal, float or complex."""
    if issubclass(cls, bool | np.bool_):
        return bool
    if issubclass(cls, numbers.Integral | np.integer):
        return int
    if issubclass(cls, Decimal):
        return Decimal
    if issubclass(cls, numbers.Rational):
        return Fraction
    if issubclass(cls, numbers.Real | np.floating):
        return float
    if issubclass(cls, numbers.Complex | np.complexfloating):
        return complex
    return None


def plain_value(value: Any) -> Any:
    """Unbox a NumPy scalar to its builtin value."""
    if isinstance(value, np.generic):
        return value.item()
    return value


class DirectAssignment(FieldHandler):
    """Assigns the source value as-is when its class is compatible with the destination.

    Collections and mappings are left to the container handlers so their
    elements are converted (and copied). Arrays declared with element types
    are left to the array handlers for the same reason.
    """

    def destination_type_constraint(self, cls: type) -> bool:
        return not (is_iterable_type(cls) or is_map_type(cls))

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        destination_class = ctx.destination_class(destination)
        if not issubclass(ctx.source_class(source), destination_class):
            return False
        return not (is_array_type(destination_class) and is_parameterized(destination.declared_type))

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is not None:
            destination.set_value(value)
        return FieldHandlerResult.CONVERTED


class PrimitiveAssignment(FieldHandler):
    """Bridges NumPy scalars and their builtin counterparts (``np.int32`` <-> ``int``)."""

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        source_class = ctx.source_class(source)
        destination_class = ctx.destination_class(destination)
        if source_class is destination_class:
            return False
        source_numpy = issubclass(source_class, np.generic)
        destination_numpy = issubclass(destination_class, np.generic)
        if source_numpy and destination_numpy:
            return builtin_of(source_class) is builtin_of(destination_class)
        if source_numpy:
            return builtin_of(source_class) is destination_class
        if destination_numpy:
            return builtin_of(destination_class) is source_class
        return False

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        destination_class = ctx.destination_class(destination)
        value = plain_value(source.value)
        if issubclass(destination_class, np.generic):
            value = destination_class(value)
        destination.set_value(value)
        return FieldHandlerResult.CONVERTED


class NumberToNumber(FieldHandler):
    """Widens numbers along the numeric tower (``int`` -> ``float`` -> ``complex``, ...)."""

    def source_type_constraint(self, cls: type) -> bool:
        return numeric_kind(cls) is not None

    def destination_type_constraint(self, cls: type) -> bool:
        return numeric_kind(cls) is not None

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        pair = (numeric_kind(ctx.source_class(source)), numeric_kind(ctx.destination_class(destination)))
        return pair in _WIDENING

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        destination_class = ctx.destination_class(destination)
        destination.set_value(destination_class(plain_value(source.value)))
        return FieldHandlerResult.CONVERTED
