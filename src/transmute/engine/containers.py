"""Building collections, mappings and arrays for declared destination types.

Abstract declared types are materialised with a concrete default:

    Iterable, Collection, Sequence, MutableSequence -> list
    AbstractSet, MutableSet                         -> set
    Mapping, MutableMapping                         -> dict
"""

from __future__ import annotations

import collections.abc as abc
from collections import defaultdict
from collections.abc import Iterable
from typing import Any, get_args

import numpy as np

from transmute.reflection.types import (
    is_array_type,
    is_iterable_type,
    is_map_type,
    raw_class,
    type_arguments,
)

_CONCRETE_COLLECTIONS: dict[type, type] = {
    abc.Iterable: list,
    abc.Iterator: list,
    abc.Generator: list,
    abc.Reversible: list,
    abc.Collection: list,
    abc.Sequence: list,
    abc.MutableSequence: list,
    abc.Set: set,
    abc.MutableSet: set,
}

_CONCRETE_MAPPINGS: dict[type, type] = {
    abc.Mapping: dict,
    abc.MutableMapping: dict,
}


def collection_class(tp: Any) -> type | None:
    """Concrete collection class for a declared iterable type, or None."""
    cls = raw_class(tp)
    if cls is None or not is_iterable_type(cls):
        return None
    concrete = _CONCRETE_COLLECTIONS.get(cls, cls)
    if getattr(concrete, "__abstractmethods__", None):
        return None
    return concrete


def map_class(tp: Any) -> type | None:
    """Concrete mapping class for a declared mapping type, or None."""
    cls = raw_class(tp)
    if cls is None or not is_map_type(cls):
        return None
    concrete = _CONCRETE_MAPPINGS.get(cls, cls)
    if getattr(concrete, "__abstractmethods__", None):
        return None
    return concrete


def is_convertible_iterable_type(tp: Any) -> bool:
    return collection_class(tp) is not None


def is_convertible_map_type(tp: Any) -> bool:
    return map_class(tp) is not None


def new_collection(tp: Any, items: Iterable[Any]) -> Any:
    """Instantiate the declared collection type filled with ``items``."""
    cls = collection_class(tp) or list
    items = list(items)
    try:
        return cls(items)
    except TypeError:
        instance = cls()
    adder = getattr(instance, "extend", None) or getattr(instance, "update", None)
    if adder is None:
        raise TypeError(f"Cannot fill collection of type {cls.__qualname__}")
    adder(items)
    return instance


def new_map(tp: Any, items: Iterable[tuple[Any, Any]]) -> Any:
    """Instantiate the declared mapping type filled with ``items``."""
    cls = map_class(tp) or dict
    if issubclass(cls, defaultdict):
        instance = cls()
        instance.update(items)
        return instance
    return cls(items)


def array_element_type(tp: Any, index: int = 0) -> Any:
    """Element type at ``index`` of a declared array type (``Any`` when unknown).

    ``tuple[X, ...]`` yields X at every index, ``tuple[X, Y]`` is positional
    and ``ndarray`` yields the scalar type of its dtype argument.
    """
    cls = raw_class(tp)
    args = type_arguments(tp)
    if cls is not None and issubclass(cls, np.ndarray):
        if len(args) >= 2:
            dtype_args = get_args(args[1])
            if dtype_args and isinstance(dtype_args[0], type):
                return dtype_args[0]
        return Any
    if len(args) == 2 and args[1] is Ellipsis:
        return args[0]
    if index < len(args) and args[index] != ():
        return args[index]
    return Any


def new_array(tp: Any, items: Iterable[Any]) -> Any:
    """Instantiate the declared array type (tuple or ndarray) from ``items``."""
    cls = raw_class(tp) or tuple
    items = list(items)
    if issubclass(cls, np.ndarray):
        element = array_element_type(tp)
        if element is not Any and issubclass(element, np.generic):
            return np.array(items, dtype=element)
        return np.array(items)
    return cls(items)


def empty_instance(tp: Any) -> Any:
    """An empty container of the declared type, or None for other types."""
    if is_convertible_iterable_type(tp):
        return new_collection(tp, ())
    if is_convertible_map_type(tp):
        return new_map(tp, ())
    if is_array_type(tp):
        return new_array(tp, ())
    return None
