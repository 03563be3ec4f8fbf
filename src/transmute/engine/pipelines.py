# src/transmute/engine/pipelines.py
"""Bulk conversions of iterables, arrays and mappings.

Each ``convert_*`` function pairs a source container with an element
converter and returns a pipeline; the pipeline's terminal methods choose the
destination container:

    convert_iterable(sources, Dto).to_list()
    convert_array(values, int).to_ndarray(np.int64)
    convert_map(raw, str, Dto).to_dict()

Element conversion is lazy: nothing is converted until a terminal method runs,
and every terminal method converts the source afresh.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping, MutableSequence, MutableSet
from typing import Any, Generic, TypeVar

import numpy as np

from transmute.contracts.errors import ConverterUsageError
from transmute.engine.configuration import Configuration
from transmute.engine.containers import (
    is_convertible_iterable_type,
    is_convertible_map_type,
    new_array,
    new_collection,
    new_map,
)
from transmute.engine.conversions import convert, convert_enveloped_from, is_destination_type
from transmute.engine.object_converter import ExtraConvert
from transmute.engine.properties import PropertyConversionEngine
from transmute.reflection.extended_field import fields_of
from transmute.reflection.types import is_array_type

S = TypeVar("S")
D = TypeVar("D")
K = TypeVar("K")
V = TypeVar("V")

ElementConverter = Callable[[Any], Any]


def _element_converter(
    destination: Any, extra_convert: ExtraConvert | None, configuration: Configuration | None
) -> ElementConverter:
    if destination is None:
        raise ConverterUsageError("Element destination cannot be None.")
    return lambda item: convert(item, destination, extra_convert, configuration=configuration)


def _value_converter(target: Any, configuration: Configuration | None) -> ElementConverter:
    """Types convert through the handler chain; any other callable is applied as-is."""
    if target is None:
        return lambda item: item
    if is_destination_type(target):
        return lambda item: convert_enveloped_from(item, target, configuration=configuration)
    if not callable(target):
        raise ConverterUsageError(f"Map key/value converter must be a type or a callable, got {target!r}")
    return target


class IterableConversionPipeline(Generic[S, D]):
    """Converts every element of an iterable into a chosen collection."""

    def __init__(self, source: Iterable[S] | None, element_converter: Callable[[S], D]) -> None:
        self._source = source if source is not None else ()
        self._element_converter = element_converter

    def __iter__(self) -> Iterator[D]:
        return (self._element_converter(item) for item in self._source)

    def to(self, target: Any) -> Any:
        """Fill ``target`` (a mutable collection instance) or build a collection of type ``target``."""
        if isinstance(target, MutableSequence):
            target.extend(self)
            return target
        if isinstance(target, MutableSet):
            target.update(self)
            return target
        result = self.to_any(target)
        if result is None:
            raise ConverterUsageError(f"Cannot collect converted elements into {target!r}")
        return result

    def to_list(self) -> list[D]:
        return list(self)

    def to_set(self) -> set[D]:
        return set(self)

    def to_tuple(self) -> tuple[D, ...]:
        return tuple(self)

    def to_any(self, tp: Any) -> Any:
        """A collection or array of declared type ``tp``; None for other types."""
        if is_convertible_iterable_type(tp):
            return new_collection(tp, self)
        if is_array_type(tp):
            return new_array(tp, self)
        return None


class ArrayConversionPipeline(IterableConversionPipeline[S, D]):
    """Converts every element of a tuple or NumPy array."""

    def to_ndarray(self, dtype: Any = None) -> np.ndarray:
        return np.array(list(self), dtype=dtype)


class MapConversionPipeline(Generic[K, V]):
    """Converts every key and value of a mapping."""

    def __init__(
        self,
        source: Mapping[Any, Any] | None,
        key_converter: Callable[[Any], K],
        value_converter: Callable[[Any], V],
    ) -> None:
        self._source = source if source is not None else {}
        self._key_converter = key_converter
        self._value_converter = value_converter

    def items(self) -> Iterable[tuple[K, V]]:
        return ((self._key_converter(key), self._value_converter(value)) for key, value in self._source.items())

    def to(self, target: Any) -> Any:
        """Fill ``target`` (a mutable mapping instance) or build a mapping of type ``target``."""
        if isinstance(target, MutableMapping):
            target.update(self.items())
            return target
        if not is_convertible_map_type(target):
            raise ConverterUsageError(f"Cannot collect converted entries into {target!r}")
        return new_map(target, self.items())

    def to_dict(self) -> dict[K, V]:
        return dict(self.items())


def convert_iterable(
    source: Iterable[Any] | None,
    destination: Any,
    extra_convert: ExtraConvert | None = None,
    *,
    configuration: Configuration | None = None,
) -> IterableConversionPipeline[Any, Any]:
    """Pipeline converting each element into ``destination`` (type, alias or factory).

    A None source behaves as an empty one.
    """
    return IterableConversionPipeline(source, _element_converter(destination, extra_convert, configuration))


def map_iterable(source: Iterable[S] | None, function: Callable[[S], D]) -> IterableConversionPipeline[S, D]:
    """Pipeline applying a plain one-argument function to each element."""
    return IterableConversionPipeline(source, function)


def convert_array(
    source: Iterable[Any] | None,
    destination: Any,
    extra_convert: ExtraConvert | None = None,
    *,
    configuration: Configuration | None = None,
) -> ArrayConversionPipeline[Any, Any]:
    """Pipeline converting each element of a tuple or NumPy array into ``destination``."""
    return ArrayConversionPipeline(source, _element_converter(destination, extra_convert, configuration))


def convert_map(
    source: Mapping[Any, Any] | None,
    key: Any = None,
    value: Any = None,
    *,
    configuration: Configuration | None = None,
) -> MapConversionPipeline[Any, Any]:
    """Pipeline converting mapping keys and values.

    ``key`` and ``value`` are each a type (converted through the handler
    chain), a one-argument callable (applied directly) or None (identity).
    """
    return MapConversionPipeline(source, _value_converter(key, configuration), _value_converter(value, configuration))


def convert_from_map(
    source: Mapping[str, Any],
    destination: Any,
    extra_convert: ExtraConvert | None = None,
    *,
    configuration: Configuration | None = None,
) -> Any:
    """Populate a new destination from a mapping's string keys.

    Raises:
        ConverterUsageError: If ``source`` is not a mapping
    """
    if not isinstance(source, Mapping):
        raise ConverterUsageError(f"Expected a mapping source, got {type(source).__qualname__}")
    return convert(source, destination, extra_convert, configuration=configuration)


def convert_to_map(source: Any, key: Any = None, value: Any = None) -> dict[Any, Any]:
    """Map each non-static field name of ``source`` to its value (converted by ``key``/``value``).

    A None source yields an empty dict.
    """
    fields: dict[str, Any] = {}
    if source is not None:
        fields = {field.name: field.value for field in fields_of(source) if not field.is_static and field.name}
    return convert_map(fields, key, value).to_dict()


def to_properties_map(source: Any) -> Any:
    """Flatten ``source`` into nested dicts, lists and strings with the default property engine."""
    return PropertyConversionEngine.default().convert(source)
