# src/transmute/contracts/simple_converters.py
"""Registry of user-supplied one-argument conversion functions.

A simple converter is any callable taking one value and returning the
converted value. Its source and destination types are read from the
callable's annotations unless given explicitly:

    def cents_to_money(cents: int) -> Money:
        return Money(Decimal(cents) / 100)

    converters = SimpleConverters.of(cents_to_money)
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from transmute.reflection.types import raw_class


@dataclass(frozen=True, slots=True)
class SimpleConverter:
    """A conversion function with the class pair it converts between."""

    function: Callable[[Any], Any]
    source_type: type
    destination_type: type

    @classmethod
    def of(
        cls,
        function: Callable[[Any], Any],
        source_type: type | None = None,
        destination_type: type | None = None,
    ) -> SimpleConverter:
        """Build a converter, reading missing types from annotations.

        Raises:
            TypeError: If a type is neither given nor annotated
        """
        if source_type is None or destination_type is None:
            hints = typing.get_type_hints(function)
            parameters = [name for name in inspect.signature(function).parameters]
            if source_type is None:
                source_type = raw_class(hints.get(parameters[0])) if parameters else None
            if destination_type is None:
                destination_type = raw_class(hints.get("return"))
        if source_type is None or destination_type is None:
            raise TypeError(f"Cannot infer source and destination types of converter {function!r}; annotate it")
        return cls(function, source_type, destination_type)

    def matches(self, source_class: type, destination_class: type) -> bool:
        return issubclass(source_class, self.source_type) and self.destination_type is destination_class

    def __call__(self, value: Any) -> Any:
        return self.function(value)


@dataclass(frozen=True, slots=True)
class SimpleConverters:
    """Immutable, ordered collection of simple converters; first match wins."""

    converters: tuple[SimpleConverter, ...] = ()

    @classmethod
    def empty(cls) -> SimpleConverters:
        return cls()

    @classmethod
    def of(cls, *converters: Callable[[Any], Any] | SimpleConverter) -> SimpleConverters:
        return cls(tuple(_as_converter(converter) for converter in converters))

    def with_converter(self, converter: Callable[[Any], Any] | SimpleConverter) -> SimpleConverters:
        """Return a registry with ``converter`` taking precedence over the current ones."""
        return SimpleConverters((_as_converter(converter), *self.converters))

    def merged(self, other: SimpleConverters) -> SimpleConverters:
        return SimpleConverters(self.converters + other.converters)

    @property
    def has_converters(self) -> bool:
        return bool(self.converters)

    def find(self, source_class: type, destination_class: type) -> SimpleConverter | None:
        for converter in self.converters:
            if converter.matches(source_class, destination_class):
                return converter
        return None

    def __iter__(self) -> Iterator[SimpleConverter]:
        return iter(self.converters)

    def __len__(self) -> int:
        return len(self.converters)


def _as_converter(converter: Callable[[Any], Any] | SimpleConverter) -> SimpleConverter:
    if isinstance(converter, SimpleConverter):
        return converter
    return SimpleConverter.of(converter)
