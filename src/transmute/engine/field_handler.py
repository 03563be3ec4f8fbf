# src/transmute/engine/field_handler.py
"""Base class and per-call context for field handlers.

A field handler is one conversion rule tested against a (source field,
destination field) pair. The engine runs handlers in order and stops at the
first CONVERTED or BREAK result. For each handler it checks, in order:

1. ``source_type_constraint`` against the source field's runtime class
2. ``destination_type_constraint`` against the destination field's class
3. ``condition(source, destination, ctx)``

and only then calls ``handle``. New conversions are added by subclassing
FieldHandler and inserting the instance into a Configuration's handler list.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from transmute.contracts.results import FieldHandlerResult
from transmute.reflection.extended_field import ExtendedField
from transmute.reflection.types import substitute_type_vars

if TYPE_CHECKING:
    from transmute.engine.configuration import Configuration


class FieldHandlerContext:
    """Per-call scratch space.

    Created fresh for every top-level conversion and discarded afterwards.
    Memoizes the runtime class of each field reference the first time a
    handler asks for it.
    """

    def __init__(self) -> None:
        self._classes: dict[int, tuple[ExtendedField, type]] = {}

    def runtime_class(self, field: ExtendedField) -> type:
        cached = self._classes.get(id(field))
        if cached is not None and cached[0] is field:
            return cached[1]
        cls = field.runtime_class
        self._classes[id(field)] = (field, cls)
        return cls

    def destination_class(self, field: ExtendedField) -> type:
        return self.runtime_class(field)

    def source_class(self, field: ExtendedField) -> type:
        return self.runtime_class(field)


class FieldHandler(ABC):
    """One rule in the handler chain.

    Subclasses override ``handle`` and, when needed, the two type
    constraints and ``condition``. Handlers compare equal when they are of
    the same class.
    """

    def __init__(self, configuration: Configuration | None = None) -> None:
        self._configuration = configuration

    @property
    def configuration(self) -> Configuration:
        """The configuration this handler is bound to (the default when unbound)."""
        if self._configuration is None:
            from transmute.engine.configuration import Configuration

            return Configuration.defaults()
        return self._configuration

    def bound_to(self, configuration: Configuration) -> FieldHandler:
        """Return a copy of this handler bound to ``configuration``."""
        bound = copy.copy(self)
        bound._configuration = configuration
        return bound

    def source_type_constraint(self, cls: type) -> bool:
        return True

    def destination_type_constraint(self, cls: type) -> bool:
        return True

    def condition(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        return True

    @abstractmethod
    def handle(
        self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext
    ) -> FieldHandlerResult: ...

    def convert(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> bool:
        """Run this handler on a field pair; True when the chain must stop."""
        if not self.source_type_constraint(ctx.source_class(source)):
            return False
        if not self.destination_type_constraint(ctx.destination_class(destination)):
            return False
        if not self.condition(source, destination, ctx):
            return False
        return self.handle(source, destination, ctx).is_handled

    # Recursion helpers. Imported lazily: the conversion entry points depend
    # on Configuration, which depends on the handler classes.

    def resolve_type(self, tp: Any) -> Any:
        """Substitute type variables bound in this handler's configuration."""
        return substitute_type_vars(tp, self.configuration.generic_types)

    def convert_from(self, value: Any, tp: Any) -> Any:
        from transmute.engine.conversions import convert_from

        return convert_from(value, tp, configuration=self.configuration)

    def convert_into(self, value: Any, destination: Any) -> Any:
        from transmute.engine.conversions import convert_into

        return convert_into(value, destination, configuration=self.configuration)

    def convert_element(self, value: Any, tp: Any) -> Any:
        from transmute.engine.conversions import convert_enveloped_from

        return convert_enveloped_from(value, tp, configuration=self.configuration)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldHandler):
            return NotImplemented
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
