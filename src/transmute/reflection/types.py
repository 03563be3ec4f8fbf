# src/transmute/reflection/types.py
"""Type introspection helpers for declared (annotation) types.

Declared types arrive in many shapes: plain classes, builtin generic aliases
(``list[int]``), ``typing`` aliases (``List[int]``), unions, ``Annotated``
wrappers, ``TypeVar`` placeholders and forward-reference strings. The helpers
here normalise them so handlers can reason about raw classes and type
arguments without caring which spelling the user chose.

All predicates take a *type* (class or alias), never a value.
"""

from __future__ import annotations

import datetime
import enum
import numbers
import types
import typing
import uuid
from collections.abc import Iterable, Mapping
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from typing import Annotated, Any, ClassVar, TypeVar, Union, get_args, get_origin

import numpy as np
import pydantic

NoneType = type(None)

_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)

# Classes treated as indivisible scalar values: never decomposed into fields.
_LEAF_TYPES: tuple[type, ...] = (
    str,
    bytes,
    bytearray,
    numbers.Number,
    np.generic,
    enum.Enum,
    uuid.UUID,
    Decimal,
    Fraction,
    PurePath,
    datetime.date,
    datetime.time,
    datetime.timedelta,
)


def strip_annotated(tp: Any) -> Any:
    """Remove ``Annotated`` wrappers, returning the underlying type."""
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def annotated_metadata(tp: Any) -> tuple[Any, ...]:
    """Collect ``Annotated`` metadata, outermost wrapper first."""
    metadata: list[Any] = []
    while get_origin(tp) is Annotated:
        metadata.extend(tp.__metadata__)
        tp = get_args(tp)[0]
    return tuple(metadata)


def unwrap_optional(tp: Any) -> Any:
    """Reduce ``X | None`` to ``X``; other unions are returned untouched."""
    tp = strip_annotated(tp)
    if get_origin(tp) in _UNION_ORIGINS:
        args = [arg for arg in get_args(tp) if arg is not NoneType]
        if len(args) == 1:
            return strip_annotated(args[0])
    return tp


def unwrap_declared(tp: Any) -> Any:
    """Normalise a declared type: strip ``Annotated``, ``Optional`` and ``ClassVar``."""
    tp = unwrap_optional(tp)
    if get_origin(tp) is ClassVar:
        args = get_args(tp)
        return unwrap_optional(args[0]) if args else Any
    if tp is ClassVar:
        return Any
    return tp


def is_class_var(tp: Any) -> bool:
    tp = strip_annotated(tp)
    return tp is ClassVar or get_origin(tp) is ClassVar


def raw_class(tp: Any) -> type | None:
    """Return the runtime class behind a declared type, or None if unknown.

    ``Any`` and ``object`` map to ``object``; an unbound ``TypeVar`` maps to
    its bound (or None); a ``NewType`` maps to its supertype.
    """
    tp = unwrap_declared(tp)
    if tp is Any:
        return object
    if isinstance(tp, type):
        return tp
    if isinstance(tp, TypeVar):
        return raw_class(tp.__bound__) if tp.__bound__ is not None else None
    supertype = getattr(tp, "__supertype__", None)
    if supertype is not None:
        return raw_class(supertype)
    origin = get_origin(tp)
    if isinstance(origin, type):
        return origin
    if origin is typing.Literal:
        literal_args = get_args(tp)
        return type(literal_args[0]) if literal_args else None
    return None


def raw_class_or_object(tp: Any) -> type:
    cls = raw_class(tp)
    return object if cls is None else cls


def type_arguments(tp: Any) -> tuple[Any, ...]:
    """Type arguments of a parameterized declared type (empty for bare classes)."""
    return get_args(unwrap_declared(tp))


def is_parameterized(tp: Any) -> bool:
    tp = unwrap_declared(tp)
    return get_origin(tp) is not None and bool(get_args(tp))


def _safe_subclass(cls: type | None, parents: type | tuple[type, ...]) -> bool:
    if cls is None:
        return False
    try:
        return issubclass(cls, parents)
    except TypeError:
        return False


def is_subclass(tp: Any, parents: type | tuple[type, ...]) -> bool:
    """``issubclass`` on the raw class of a declared type; False when unknown."""
    return _safe_subclass(raw_class(tp), parents)


def is_char_sequence_type(tp: Any) -> bool:
    return is_subclass(tp, str)


def is_bytes_type(tp: Any) -> bool:
    return is_subclass(tp, (bytes, bytearray, memoryview))


def is_enum_type(tp: Any) -> bool:
    return is_subclass(tp, enum.Enum)


def is_number_type(tp: Any) -> bool:
    return is_subclass(tp, (numbers.Number, np.number, np.bool_))


def is_map_type(tp: Any) -> bool:
    return is_subclass(tp, Mapping)


def is_array_type(tp: Any) -> bool:
    """Tuples (other than named tuples) and NumPy arrays."""
    cls = raw_class(tp)
    if _safe_subclass(cls, np.ndarray):
        return True
    return _safe_subclass(cls, tuple) and not hasattr(cls, "_fields")


def is_iterable_type(tp: Any) -> bool:
    """Iterables that hold elements: excludes text, bytes, mappings and arrays.

    Pydantic models define ``__iter__`` over their fields but are records.
    """
    cls = raw_class(tp)
    if not _safe_subclass(cls, Iterable):
        return False
    if _safe_subclass(cls, (str, bytes, bytearray, memoryview, Mapping, enum.Enum, pydantic.BaseModel)):
        return False
    return not is_array_type(cls)


def is_leaf_type(tp: Any) -> bool:
    """Scalar types that are never decomposed into fields."""
    return is_subclass(tp, _LEAF_TYPES)


def is_record_type(tp: Any) -> bool:
    """Types the generic catch-all may decompose field by field."""
    cls = raw_class(tp)
    if cls is None:
        return False
    return not (
        cls is object
        or is_leaf_type(cls)
        or is_iterable_type(cls)
        or is_map_type(cls)
        or is_array_type(cls)
        or cls is NoneType
    )


def resolve_generic_argument(tp: Any, index: int) -> Any:
    """Best-effort concrete type argument ``index`` of a declared generic type.

    Returns None when the declared type carries no argument at that position.
    The result may still be a ``TypeVar``; callers resolve it against a
    binding table.
    """
    args = type_arguments(tp)
    if index < len(args):
        arg = args[index]
        return None if arg is Ellipsis else arg
    return None


def type_parameters(tp: Any) -> tuple[TypeVar, ...]:
    """The ``TypeVar`` parameters declared by the origin of ``tp``."""
    origin = get_origin(unwrap_declared(tp)) or unwrap_declared(tp)
    params = getattr(origin, "__parameters__", ())
    return tuple(param for param in params if isinstance(param, TypeVar))


def bind_type_arguments(tp: Any) -> dict[str, Any]:
    """Map each type parameter name of ``tp``'s origin to its concrete argument."""
    params = type_parameters(tp)
    args = type_arguments(tp)
    return {param.__name__: arg for param, arg in zip(params, args, strict=False) if not isinstance(arg, TypeVar)}


def substitute_type_vars(tp: Any, bindings: Mapping[str, Any]) -> Any:
    """Replace ``TypeVar`` occurrences in ``tp`` using ``bindings`` (by name).

    Unbound type variables are left in place.
    """
    if not bindings:
        return tp
    if isinstance(tp, TypeVar):
        return bindings.get(tp.__name__, tp)
    tp = strip_annotated(tp)
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is None or not args:
        return tp
    new_args = tuple(
        arg if arg is Ellipsis or isinstance(arg, list) else substitute_type_vars(arg, bindings) for arg in args
    )
    if new_args == args:
        return tp
    if origin in _UNION_ORIGINS:
        return Union[new_args]  # noqa: UP007
    if isinstance(tp, types.GenericAlias):
        return types.GenericAlias(origin, new_args)
    copy_with = getattr(tp, "copy_with", None)
    if copy_with is not None:
        return copy_with(new_args)
    return tp


def type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)
