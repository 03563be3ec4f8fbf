"""Reflection-access layer used by the conversion engine.

Provides the primitives the engine relies on (read, write, enumerate,
construct, resolve generic arguments) and the ExtendedField reference built
on top of them.
"""

from transmute.reflection.extended_field import ExtendedField, field_of, fields_of
from transmute.reflection.members import (
    AccessorInfo,
    FieldInfo,
    accessor_field_name,
    constructor_accepts,
    construct,
    converter_methods,
    enumerate_accessors,
    enumerate_fields,
    get_field_value,
    runtime_type_bindings,
    set_field_value,
)
from transmute.reflection.types import (
    is_array_type,
    is_char_sequence_type,
    is_enum_type,
    is_iterable_type,
    is_leaf_type,
    is_map_type,
    is_record_type,
    raw_class,
    resolve_generic_argument,
    substitute_type_vars,
)

__all__ = [
    "AccessorInfo",
    "ExtendedField",
    "FieldInfo",
    "accessor_field_name",
    "construct",
    "constructor_accepts",
    "converter_methods",
    "enumerate_accessors",
    "enumerate_fields",
    "field_of",
    "fields_of",
    "get_field_value",
    "is_array_type",
    "is_char_sequence_type",
    "is_enum_type",
    "is_iterable_type",
    "is_leaf_type",
    "is_map_type",
    "is_record_type",
    "raw_class",
    "resolve_generic_argument",
    "runtime_type_bindings",
    "set_field_value",
    "substitute_type_vars",
]
