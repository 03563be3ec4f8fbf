# src/transmute/engine/handlers/containers.py
"""Handlers converting between collections, arrays and mappings.

Elements are converted one by one through the full handler chain, using the
element type declared on the destination field. Type variables in element
types are resolved against the configuration's binding table; an element
type that stays unknown leaves elements as they are.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from transmute.contracts.results import FieldHandlerResult
from transmute.engine.containers import (
    array_element_type,
    is_convertible_iterable_type,
    is_convertible_map_type,
    new_array,
    new_collection,
    new_map,
)
from transmute.engine.field_handler import FieldHandler, FieldHandlerContext
from transmute.reflection.extended_field import ExtendedField
from transmute.reflection.types import is_array_type, is_iterable_type, is_map_type


class ContainerHandler(FieldHandler):
    """Shared element conversion for the container handlers."""

    def element_type(self, tp: Any) -> Any:
        if tp is None:
            return Any
        resolved = self.resolve_type(tp)
        if isinstance(resolved, TypeVar):
            return resolved.__bound__ if resolved.__bound__ is not None else Any
        return resolved

    def convert_elements(self, items: Iterable[Any], tp: Any) -> list[Any]:
        element_type = self.element_type(tp)
        if element_type is Any or element_type is object:
            return list(items)
        return [self.convert_element(item, element_type) for item in items]

    def array_type(self, destination: ExtendedField, ctx: FieldHandlerContext) -> Any:
        declared = destination.declared_type
        return declared if is_array_type(declared) else ctx.destination_class(destination)

    def convert_to_array(self, items: Iterable[Any], array_type: Any) -> Any:
        converted = []
        for index, item in enumerate(items):
            element_type = array_element_type(array_type, index)
            if element_type is not Any:
                item = self.convert_element(item, self.element_type(element_type))
            converted.append(item)
        return new_array(array_type, converted)


class IterableToIterable(ContainerHandler):
    def source_type_constraint(self, cls: type) -> bool:
        return is_iterable_type(cls)

    def destination_type_constraint(self, cls: type) -> bool:
        return is_convertible_iterable_type(cls)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        items = self.convert_elements(value, destination.generic_argument(0))
        destination.set_value(new_collection(ctx.destination_class(destination), items))
        return FieldHandlerResult.CONVERTED


class ArrayToArray(ContainerHandler):
    def source_type_constraint(self, cls: type) -> bool:
        return is_array_type(cls)

    def destination_type_constraint(self, cls: type) -> bool:
        return is_array_type(cls)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        destination.set_value(self.convert_to_array(value, self.array_type(destination, ctx)))
        return FieldHandlerResult.CONVERTED


class IterableToArray(ContainerHandler):
    def source_type_constraint(self, cls: type) -> bool:
        return is_iterable_type(cls)

    def destination_type_constraint(self, cls: type) -> bool:
        return is_array_type(cls)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        destination.set_value(self.convert_to_array(value, self.array_type(destination, ctx)))
        return FieldHandlerResult.CONVERTED


class ArrayToIterable(ContainerHandler):
    def source_type_constraint(self, cls: type) -> bool:
        return is_array_type(cls)

    def destination_type_constraint(self, cls: type) -> bool:
        return is_convertible_iterable_type(cls)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        items = self.convert_elements(value, destination.generic_argument(0))
        destination.set_value(new_collection(ctx.destination_class(destination), items))
        return FieldHandlerResult.CONVERTED


class MapToMap(ContainerHandler):
    """Converts mapping keys and values to the destination's declared key/value types."""

    def source_type_constraint(self, cls: type) -> bool:
        return is_map_type(cls)

    def destination_type_constraint(self, cls: type) -> bool:
        return is_convertible_map_type(cls)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        keys = self.convert_elements(value.keys(), destination.generic_argument(0))
        values = self.convert_elements(value.values(), destination.generic_argument(1))
        destination.set_value(new_map(ctx.destination_class(destination), zip(keys, values, strict=True)))
        return FieldHandlerResult.CONVERTED


class AnyToIterable(ContainerHandler):
    """Wraps a single value into a one-element collection."""

    def source_type_constraint(self, cls: type) -> bool:
        return not (is_iterable_type(cls) or is_map_type(cls) or is_array_type(cls))

    def destination_type_constraint(self, cls: type) -> bool:
        return is_convertible_iterable_type(cls)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        items = self.convert_elements((value,), destination.generic_argument(0))
        destination.set_value(new_collection(ctx.destination_class(destination), items))
        return FieldHandlerResult.CONVERTED
