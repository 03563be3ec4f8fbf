# src/transmute/engine/conversions.py
"""Conversion entry points.

Every public conversion funnels into ObjectConverter:

- ``convert``: source into a destination type, parameterized alias or factory
- ``convert_from``: source into a declared type (records, containers, leaves)
- ``convert_into``: source into an existing destination instance
- ``convert_enveloped_from``: one value through the handler chain, as if it
  were a field declared with the target type
- ``copy_from`` / ``clone_of``: same-class field copy, else conversion
- ``compose``: chain two extra-conversion callbacks
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from transmute.contracts.errors import ConverterUsageError
from transmute.engine.configuration import Configuration
from transmute.engine.field_handler import FieldHandlerContext
from transmute.engine.object_converter import ExtraConvert, ObjectConverter
from transmute.reflection.extended_field import ExtendedField
from transmute.reflection.members import (
    construct,
    enumerate_fields,
    get_field_value,
    instance_field_names,
    set_field_value,
)
from transmute.reflection.types import (
    is_array_type,
    is_iterable_type,
    is_leaf_type,
    is_map_type,
    is_parameterized,
    is_record_type,
    raw_class,
    substitute_type_vars,
    type_name,
    unwrap_declared,
)

log = structlog.get_logger(__name__)

ENVELOPE_KEY = "<envelope>"

D = TypeVar("D")


def _configuration(configuration: Configuration | None) -> Configuration:
    return configuration if configuration is not None else Configuration.defaults()


def _resolve(tp: Any, configuration: Configuration) -> Any:
    """Substitute bound type variables; an unbound one falls back to its bound or ``Any``."""
    resolved = substitute_type_vars(unwrap_declared(tp), configuration.generic_types)
    if isinstance(resolved, TypeVar):
        return resolved.__bound__ if resolved.__bound__ is not None else Any
    return resolved


def is_destination_type(destination: Any) -> bool:
    return isinstance(destination, type) or (is_parameterized(destination) and raw_class(destination) is not None)


def convert(
    source: Any,
    destination: Any,
    extra_convert: ExtraConvert | None = None,
    *,
    configuration: Configuration | None = None,
) -> Any:
    """Convert ``source`` into a new destination.

    Args:
        source: Object to read from
        destination: Destination class, parameterized alias (``Box[int]``) or
            zero-argument factory
        extra_convert: Optional ``(source, destination)`` callback run last
        configuration: Conversion configuration (defaults to the shared default)

    Returns:
        The populated destination

    Raises:
        ConverterUsageError: If ``source`` or ``destination`` is None, or the
            destination is neither a type nor a callable
        ConversionError: If a field pair fails to convert
    """
    if destination is None:
        raise ConverterUsageError("Converter destination factory cannot be None.")
    if is_destination_type(destination):
        return convert_from(source, destination, extra_convert, configuration=configuration)
    if not callable(destination):
        raise ConverterUsageError(f"Converter destination must be a type or a factory, got {destination!r}")
    return ObjectConverter(_configuration(configuration)).convert(source, destination, extra_convert)


def convert_from(
    source: Any,
    tp: Any,
    extra_convert: ExtraConvert | None = None,
    *,
    configuration: Configuration | None = None,
) -> Any:
    """Convert ``source`` into a new value of the declared type ``tp``.

    Record types are constructed and converted field by field; the type
    arguments of a parameterized record seed the binding table used for the
    nested fields. Containers and leaf types are converted through the
    handler chain as a single value.

    Raises:
        ConverterUsageError: If ``source`` is None or ``tp`` cannot be a
            conversion target
    """
    if source is None:
        raise ConverterUsageError("Converter source cannot be None.")
    configuration = _configuration(configuration)
    resolved = _resolve(tp, configuration)
    if resolved is Any or resolved is object:
        return source
    if is_iterable_type(resolved) or is_map_type(resolved) or is_array_type(resolved) or is_leaf_type(resolved):
        return convert_enveloped_from(source, resolved, configuration=configuration)
    if not is_record_type(resolved):
        raise ConverterUsageError(f"Could not convert to type {type_name(resolved)}")
    configuration = Configuration.copy_with(resolved, configuration)
    destination = construct(resolved)
    return ObjectConverter(configuration).convert_into(source, destination, extra_convert)


def convert_into(
    source: Any,
    destination: D,
    extra_convert: ExtraConvert | None = None,
    *,
    configuration: Configuration | None = None,
) -> D:
    """Convert ``source`` into an existing ``destination`` instance and return it."""
    return ObjectConverter(_configuration(configuration)).convert_into(source, destination, extra_convert)


def convert_enveloped_from(value: Any, tp: Any, *, configuration: Configuration | None = None) -> Any:
    """Convert a single value to ``tp`` through the handler chain.

    The value is wrapped in a one-entry mapping and converted into an entry
    declared with ``tp``, so it takes exactly the path a field of that type
    would take. Returns None when no handler converts the value.
    """
    configuration = _configuration(configuration)
    resolved = _resolve(tp, configuration)
    source_envelope = {ENVELOPE_KEY: value}
    destination_envelope: dict[str, Any] = {}
    source_field = ExtendedField.of_entry(source_envelope, ENVELOPE_KEY)
    destination_field = ExtendedField.of_entry(destination_envelope, ENVELOPE_KEY, declared_type=resolved)
    ObjectConverter(configuration).convert_field(source_field, destination_field, FieldHandlerContext())
    if ENVELOPE_KEY not in destination_envelope:
        log.debug("No handler converted value", value_type=type(value).__qualname__, target=type_name(resolved))
    return destination_envelope.get(ENVELOPE_KEY)


def _copy_fields(source: Any, destination: Any, *, override_all: bool) -> None:
    names = [info.name for info in enumerate_fields(type(source)) if not info.is_static]
    names.extend(name for name in instance_field_names(source) if name not in names)
    for name in names:
        value = get_field_value(source, name)
        if override_all or value is not None:
            set_field_value(destination, name, value)


def copy_from(source: Any, destination_factory: Callable[[], D] | None, *, override_all: bool = False) -> D | None:
    """Copy ``source`` into the destination produced by ``destination_factory``.

    When both are of the same class the raw fields are copied as-is (None
    values only when ``override_all``); otherwise ``source`` is converted into
    the destination. A None factory or destination yields None, and a None
    source leaves the destination untouched.
    """
    if destination_factory is None:
        return None
    destination = destination_factory()
    if destination is None:
        return None
    if source is None:
        return destination
    if type(destination) is type(source):
        _copy_fields(source, destination, override_all=override_all)
        return destination
    return convert_into(source, destination)


def clone_of(source: D) -> D | None:
    """A shallow field-by-field copy of ``source`` (None for None)."""
    if source is None:
        return None
    tp = getattr(source, "__orig_class__", type(source))
    return copy_from(source, lambda: construct(tp))


def compose(first: ExtraConvert | None, second: ExtraConvert | None) -> ExtraConvert | None:
    """An extra-conversion callback running ``first`` then ``second``."""
    if first is None:
        return second
    if second is None:
        return first

    def composed(source: Any, destination: Any) -> None:
        first(source, destination)
        second(source, destination)

    return composed
