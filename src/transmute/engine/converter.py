# src/transmute/engine/converter.py
"""Fluent conversion builder.

    Converter(order)
        .exclude("internal_id")
        .expand("lines")
        .with_converter(money_to_text)
        .with_field_names(customer="buyer.name")
        .with_extra(lambda src, dst: ...)
        .to(OrderDto)

Every step returns a new builder; the configuration is assembled when ``to``
or ``into`` runs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from transmute.contracts.inclusion import ExcludedFields, ExpandableFields
from transmute.contracts.simple_converters import SimpleConverter, SimpleConverters
from transmute.engine.configuration import Configuration
from transmute.engine.conversions import compose, convert, convert_into
from transmute.engine.field_handler import FieldHandler
from transmute.engine.handlers import FIELD_HANDLERS
from transmute.engine.object_converter import ExtraConvert
from transmute.engine.strategies import default_strategies

S = TypeVar("S")
D = TypeVar("D")


@dataclass(frozen=True)
class Converter(Generic[S]):
    """Immutable builder for a single conversion of ``source``."""

    source: S
    excluded_fields: ExcludedFields = field(default_factory=ExcludedFields)
    expandable_fields: ExpandableFields = field(default_factory=ExpandableFields)
    simple_converters: SimpleConverters = field(default_factory=SimpleConverters)
    field_names: tuple[tuple[str, str], ...] = ()
    handlers: tuple[FieldHandler, ...] = FIELD_HANDLERS
    extra_convert: ExtraConvert | None = None

    def exclude(self, *names: str) -> Converter[S]:
        """Never write the named destination fields (adds to earlier exclusions)."""
        if not names:
            return self
        current = self.excluded_fields.names or ()
        return replace(self, excluded_fields=ExcludedFields.of((*current, *names)))

    def exclude_all(self) -> Converter[S]:
        return replace(self, excluded_fields=ExcludedFields.exclude_all())

    def expand(self, *names: str) -> Converter[S]:
        """Convert only the named expandable fields; with no names, none of them."""
        current = self.expandable_fields.names or ()
        return replace(self, expandable_fields=ExpandableFields.of((*current, *names)))

    def expand_all(self) -> Converter[S]:
        return replace(self, expandable_fields=ExpandableFields.expand_all())

    def expand_none(self) -> Converter[S]:
        return replace(self, expandable_fields=ExpandableFields.expand_none())

    def with_converter(self, converter: Callable[[Any], Any] | SimpleConverter) -> Converter[S]:
        return replace(self, simple_converters=self.simple_converters.with_converter(converter))

    def with_field_names(self, names: Mapping[str, str] | None = None, **more: str) -> Converter[S]:
        """Map destination field names to source names or dotted paths."""
        merged = {**dict(self.field_names), **(names or {}), **more}
        return replace(self, field_names=tuple(sorted(merged.items())))

    def with_handlers(self, handlers: tuple[FieldHandler, ...] | list[FieldHandler]) -> Converter[S]:
        return replace(self, handlers=tuple(handlers))

    def with_extra(self, extra_convert: ExtraConvert) -> Converter[S]:
        """Add a ``(source, destination)`` callback, run after any earlier one."""
        return replace(self, extra_convert=compose(self.extra_convert, extra_convert))

    def configuration(self) -> Configuration:
        return Configuration.of(
            handlers=self.handlers,
            strategies=default_strategies(dict(self.field_names)),
            excluded_fields=self.excluded_fields,
            expandable_fields=self.expandable_fields,
            simple_converters=self.simple_converters,
        )

    def to(self, destination: Any) -> Any:
        """Convert into a new ``destination`` (class, parameterized alias or factory)."""
        return convert(self.source, destination, self.extra_convert, configuration=self.configuration())

    def into(self, destination: D) -> D:
        """Convert into an existing ``destination`` instance."""
        return convert_into(self.source, destination, self.extra_convert, configuration=self.configuration())
