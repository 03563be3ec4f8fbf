# src/transmute/engine/handlers/fallbacks.py
"""Fallback handlers: factories, constructors, user converters and recursion."""

from __future__ import annotations

from typing import Any

import structlog

from transmute.contracts.results import FieldHandlerResult
from transmute.engine.field_handler import FieldHandler, FieldHandlerContext
from transmute.reflection.extended_field import ExtendedField
from transmute.reflection.members import constructor_accepts, converter_methods
from transmute.reflection.types import is_map_type, is_record_type, raw_class

log = structlog.get_logger(__name__)


def _owned_value(destination: ExtendedField) -> Any:
    """The destination's current value, unless it is a class-level default shared by all instances."""
    value = destination.value
    if value is None or destination.owner is None or destination.name is None:
        return value
    if getattr(type(destination.owner), destination.name, None) is value:
        return None
    return value


class AnyToAnyFromFactory(FieldHandler):
    """Builds the destination through one of its static factories taking the source class."""

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        return bool(converter_methods(ctx.destination_class(destination), ctx.source_class(source)))

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        for factory in converter_methods(ctx.destination_class(destination), ctx.source_class(source)):
            converted = factory(value)
            if converted is not None:
                destination.set_value(converted)
                return FieldHandlerResult.CONVERTED
        return FieldHandlerResult.SKIP


class AnyToAnyFromConstructor(FieldHandler):
    """Builds the destination by calling its one-argument constructor with the source value.

    A constructor that rejects the value passes the field to the next handler.
    """

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        return constructor_accepts(ctx.destination_class(destination), ctx.source_class(source))

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        destination_class = ctx.destination_class(destination)
        try:
            converted = destination_class(source.value)
        except (TypeError, ValueError) as exc:
            log.debug(
                "Constructor rejected source value",
                destination_class=destination_class.__qualname__,
                field=destination.name,
                error=str(exc),
            )
            return FieldHandlerResult.SKIP
        destination.set_value(converted)
        return FieldHandlerResult.CONVERTED


class AnyToAnyFromConversionMethod(FieldHandler):
    """Applies a registered simple converter matching the (source, destination) class pair."""

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        converters = self.configuration.simple_converters
        if not converters.has_converters:
            return False
        return converters.find(ctx.source_class(source), ctx.destination_class(destination)) is not None

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.SKIP
        converter = self.configuration.simple_converters.find(ctx.source_class(source), ctx.destination_class(destination))
        if converter is None:
            return FieldHandlerResult.SKIP
        destination.set_value(converter(value))
        return FieldHandlerResult.CONVERTED


class RecordHandler(FieldHandler):
    """Base for handlers that recurse into a record-typed destination."""

    def destination_type_constraint(self, cls: type) -> bool:
        return is_record_type(cls)

    def target_type(self, destination: ExtendedField, ctx: FieldHandlerContext) -> Any:
        declared = self.resolve_type(destination.declared_type)
        if raw_class(declared) is ctx.destination_class(destination):
            return declared
        return ctx.destination_class(destination)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.SKIP
        existing = _owned_value(destination)
        if existing is not None:
            destination.set_value(self.convert_into(value, existing))
        else:
            destination.set_value(self.convert_from(value, self.target_type(destination, ctx)))
        return FieldHandlerResult.CONVERTED


class MapToAny(RecordHandler):
    """Populates a record destination from a mapping's keys."""

    def source_type_constraint(self, cls: type) -> bool:
        return is_map_type(cls)


class AnyToAny(RecordHandler):
    """Generic catch-all: converts a record source into a record destination field by field.

    The destination's current value is converted into when present;
    otherwise a new instance of the (type-variable resolved) declared type
    is created.
    """

    def source_type_constraint(self, cls: type) -> bool:
        return is_record_type(cls)
