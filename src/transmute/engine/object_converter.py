# src/transmute/engine/object_converter.py
"""ObjectConverter: orchestrates the conversion of one object into another.

For every writable, non-static destination field the converter:

1. computes the effective source name (the field name, unless a ``Src``
   marker overrides it, optionally for one exact source class)
2. resolves the source field through the strategy chain
3. runs the handler chain on the (source, destination) pair

and finally calls the caller's extra callback, which therefore always has
the last word. A handler failure is wrapped in ConversionError carrying the
field pair; fields converted before the failure keep their values.

Recursion depth follows the depth of the object graph. Cyclic object graphs
are not detected here and exhaust the call stack; flatten them with
PropertyConversionEngine instead.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

import structlog

from transmute.contracts.errors import ConversionError, ConverterUsageError
from transmute.contracts.markers import Src
from transmute.engine.configuration import Configuration
from transmute.engine.field_handler import FieldHandlerContext
from transmute.engine.strategies import find_source_field
from transmute.reflection.extended_field import ExtendedField, fields_of

log = structlog.get_logger(__name__)

S = TypeVar("S")
D = TypeVar("D")

ExtraConvert = Callable[[Any, Any], None]


class ObjectConverter(Generic[S, D]):
    """Converts a source object into a destination object field by field.

    Subclasses may override ``after_convert`` to add type-pair specific logic
    that runs after the automatic conversion and before the extra callback.
    """

    def __init__(self, configuration: Configuration | None = None) -> None:
        self._configuration = configuration if configuration is not None else Configuration.defaults()

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    def convert(
        self,
        source: S,
        destination_factory: Callable[[], D],
        extra_convert: ExtraConvert | None = None,
    ) -> D:
        """Convert ``source`` into a new destination.

        Args:
            source: Object to read from
            destination_factory: Zero-argument callable producing the destination
            extra_convert: Optional ``(source, destination)`` callback run last

        Returns:
            The populated destination

        Raises:
            ConverterUsageError: If ``source`` or ``destination_factory`` is None
            ConversionError: If a handler fails on a field pair
        """
        if source is None:
            raise ConverterUsageError("Converter source cannot be None.")
        if destination_factory is None:
            raise ConverterUsageError("Converter destination factory cannot be None.")
        destination = destination_factory()
        return self.convert_into(source, destination, extra_convert)

    def convert_into(self, source: S, destination: D, extra_convert: ExtraConvert | None = None) -> D:
        """Convert ``source`` into an existing ``destination`` instance."""
        if source is None:
            raise ConverterUsageError("Converter source cannot be None.")
        if destination is None:
            raise ConverterUsageError("Converter destination cannot be None.")
        ctx = FieldHandlerContext()
        self.convert_fields(source, destination, ctx)
        self.after_convert(source, destination)
        if extra_convert is not None:
            extra_convert(source, destination)
        return destination

    def after_convert(self, source: S, destination: D) -> None:
        """Hook for subclasses; runs after the automatic field conversion."""

    def convert_fields(self, source: Any, destination: Any, ctx: FieldHandlerContext) -> None:
        source_fields: list[ExtendedField] | None = None
        for destination_field in fields_of(destination, self._configuration.generic_types):
            if destination_field.is_static or not destination_field.is_writable:
                continue
            if source_fields is None:
                source_fields = [field for field in fields_of(source) if not field.is_static]
            name = self.source_field_name(destination_field, source)
            source_field = find_source_field(self._configuration.strategies, source, name, source_fields)
            if not source_field.has_owner:
                log.debug(
                    "No source field for destination field",
                    destination=type(destination).__qualname__,
                    field=destination_field.name,
                    source_name=name,
                )
                continue
            self.convert_field(source_field, destination_field, ctx)

    def source_field_name(self, destination_field: ExtendedField, source: Any) -> str:
        """Effective source name: a ``Src`` override, else the destination field's name."""
        override: Src | None = destination_field.marker(Src)
        if override is not None and isinstance(override, Src):
            name = override.source_name(source)
            if name is not None:
                return name
        return destination_field.name or ""

    def convert_field(self, source_field: ExtendedField, destination_field: ExtendedField, ctx: FieldHandlerContext) -> None:
        """Run the handler chain on one field pair."""
        try:
            for handler in self._configuration.field_handlers:
                if handler.convert(source_field, destination_field, ctx):
                    log.debug(
                        "Converted field",
                        field=destination_field.name,
                        handler=type(handler).__name__,
                    )
                    return
        except Exception as exc:
            log.warning(
                "Field conversion failed",
                source_field=source_field.name,
                destination_field=destination_field.name,
                error=str(exc),
            )
            raise ConversionError(
                "Error converting fields:",
                source_field=source_field,
                destination_field=destination_field,
            ) from exc
