"""Guard handlers: stop the chain before any value conversion happens."""

from __future__ import annotations

from transmute.contracts.results import FieldHandlerResult
from transmute.engine.containers import empty_instance
from transmute.engine.field_handler import FieldHandler, FieldHandlerContext
from transmute.reflection.extended_field import ExtendedField


class NullSourceSkipper(FieldHandler):
    """Leaves the destination untouched when the source value is None."""

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        return source.value is None

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        return FieldHandlerResult.BREAK


class StaticFieldSkipper(FieldHandler):
    """Never converts class-level (ClassVar) fields on either side."""

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        return source.is_static or destination.is_static

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        return FieldHandlerResult.BREAK


class ExcludedFieldHandler(FieldHandler):
    """Stops the chain for fields named in the configuration's excluded set.

    Runs without the type checks so the source value is never read.
    """

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        excluded = self.configuration.excluded_fields
        return excluded.should_exclude(destination.name) or excluded.should_exclude(source.name)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        return FieldHandlerResult.BREAK

    def convert(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        return self.condition(source, destination, ctx) and self.handle(source, destination, ctx).is_handled


class ExpandableFieldHandler(FieldHandler):
    """Short-circuits expandable fields that are not selected for expansion.

    The destination receives an empty container of its declared type (or
    None for non-container types). The source value is never read, so a
    getter behind an unexpanded field is never invoked.
    """

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        expandable = self.configuration.expandable_fields
        return expandable.should_not_expand_field(source) or expandable.should_not_expand_field(destination)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        destination.set_value(empty_instance(destination.type))
        return FieldHandlerResult.CONVERTED

    def convert(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        return self.condition(source, destination, ctx) and self.handle(source, destination, ctx).is_handled
