# src/transmute/engine/handlers/__init__.py
"""Built-in field handlers and their contractual default order.

Default chain (first CONVERTED or BREAK wins):

    NullSourceSkipper, StaticFieldSkipper            guards
    DirectAssignment, PrimitiveAssignment            same type / NumPy scalars
    NumberToNumber                                   numeric widening
    CharSequenceToEnum, AnyToString, AnyToBytes,
    CharSequenceToAnyFromFactory                     text bridges
    IterableToIterable, ArrayToArray,
    IterableToArray, ArrayToIterable, MapToMap       containers
    AnyToAnyFromFactory, AnyToAnyFromConstructor,
    AnyToIterable, MapToAny                          fallbacks
    AnyToAny                                         recursive catch-all

A custom configuration additionally runs the handlers in
``HANDLERS_BEFORE_DEFAULT`` ahead of the caller's list, bound to itself.
"""

from transmute.engine.field_handler import FieldHandler
from transmute.engine.handlers.assignment import DirectAssignment, NumberToNumber, PrimitiveAssignment
from transmute.engine.handlers.containers import (
    AnyToIterable,
    ArrayToArray,
    ArrayToIterable,
    ContainerHandler,
    IterableToArray,
    IterableToIterable,
    MapToMap,
)
from transmute.engine.handlers.fallbacks import (
    AnyToAny,
    AnyToAnyFromConstructor,
    AnyToAnyFromConversionMethod,
    AnyToAnyFromFactory,
    MapToAny,
    RecordHandler,
)
from transmute.engine.handlers.guards import (
    ExcludedFieldHandler,
    ExpandableFieldHandler,
    NullSourceSkipper,
    StaticFieldSkipper,
)
from transmute.engine.handlers.text import (
    AnyToBytes,
    AnyToString,
    CharSequenceToAnyFromFactory,
    CharSequenceToEnum,
)

# Classes, instantiated bound to a custom Configuration ahead of the caller's handlers.
HANDLERS_BEFORE_DEFAULT: tuple[type[FieldHandler], ...] = (
    ExcludedFieldHandler,
    ExpandableFieldHandler,
    AnyToAnyFromConversionMethod,
    IterableToIterable,
    ArrayToArray,
    IterableToArray,
    ArrayToIterable,
    MapToMap,
)

# Classes, instantiated bound to the Configuration after the caller's handlers.
HANDLERS_AFTER_DEFAULT: tuple[type[FieldHandler], ...] = (AnyToAny,)

FIELD_HANDLERS: tuple[FieldHandler, ...] = (
    NullSourceSkipper(),
    StaticFieldSkipper(),
    DirectAssignment(),
    PrimitiveAssignment(),
    NumberToNumber(),
    CharSequenceToEnum(),
    AnyToString(),
    AnyToBytes(),
    CharSequenceToAnyFromFactory(),
    IterableToIterable(),
    ArrayToArray(),
    IterableToArray(),
    ArrayToIterable(),
    MapToMap(),
    AnyToAnyFromFactory(),
    AnyToAnyFromConstructor(),
    AnyToIterable(),
    MapToAny(),
)


def default_field_handlers() -> list[FieldHandler]:
    """A fresh, mutable copy of the default handler list (without the catch-all)."""
    return list(FIELD_HANDLERS)


__all__ = [
    "FIELD_HANDLERS",
    "HANDLERS_AFTER_DEFAULT",
    "HANDLERS_BEFORE_DEFAULT",
    "AnyToAny",
    "AnyToAnyFromConstructor",
    "AnyToAnyFromConversionMethod",
    "AnyToAnyFromFactory",
    "AnyToBytes",
    "AnyToIterable",
    "AnyToString",
    "ArrayToArray",
    "ArrayToIterable",
    "CharSequenceToAnyFromFactory",
    "CharSequenceToEnum",
    "ContainerHandler",
    "DirectAssignment",
    "ExcludedFieldHandler",
    "ExpandableFieldHandler",
    "FieldHandler",
    "IterableToArray",
    "IterableToIterable",
    "MapToAny",
    "MapToMap",
    "NullSourceSkipper",
    "NumberToNumber",
    "PrimitiveAssignment",
    "RecordHandler",
    "StaticFieldSkipper",
    "default_field_handlers",
]
