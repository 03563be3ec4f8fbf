# src/transmute/engine/strategies.py
"""Field-resolution strategies: locate the source counterpart of a destination field.

Strategies run in order and the first one returning a reference with an
owning object wins:

1. BasicNameStrategy      exact name among the source's fields
2. FieldNameMapStrategy   explicit destination->source name table
3. PathStrategy           dotted path through raw attributes ("address.city")
4. NamePathStrategy       dotted path through any field reference
                          (attributes, getters, properties, mapping keys)

No match is not an error; the destination field keeps its current value.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from transmute.reflection.extended_field import ExtendedField, field_of
from transmute.reflection.members import enumerate_fields, get_field_value, instance_field_names

PATH_SEPARATOR = "."


class ConversionStrategy(ABC):
    """A rule for finding the source field that feeds a destination field."""

    @abstractmethod
    def find(self, source: Any, name: str, fields: Sequence[ExtendedField]) -> ExtendedField:
        """Return the source field reference for ``name``.

        Args:
            source: The source object
            name: Effective source name (after any per-field override)
            fields: The source's non-static field references

        Returns:
            The matching reference, or an empty reference when not found
        """


def _by_name(name: str, fields: Sequence[ExtendedField]) -> ExtendedField:
    for field in fields:
        if field.name == name:
            return field
    return ExtendedField.empty()


def _has_raw_field(instance: Any, name: str) -> bool:
    if isinstance(instance, Mapping):
        return False
    declared = any(info.name == name and not info.is_static for info in enumerate_fields(type(instance)))
    return declared or name in instance_field_names(instance)


@dataclass(frozen=True, slots=True)
class BasicNameStrategy(ConversionStrategy):
    """Matches the source field with exactly the same name."""

    def find(self, source: Any, name: str, fields: Sequence[ExtendedField]) -> ExtendedField:
        return _by_name(name, fields)


@dataclass(frozen=True, slots=True)
class FieldNameMapStrategy(ConversionStrategy):
    """Looks the name up in an explicit destination->source name table.

    Mapped source names may be dotted paths.
    """

    names: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, names: Mapping[str, str] | None) -> FieldNameMapStrategy:
        return cls(tuple(sorted((names or {}).items())))

    def find(self, source: Any, name: str, fields: Sequence[ExtendedField]) -> ExtendedField:
        mapped = dict(self.names).get(name)
        if mapped is None:
            return ExtendedField.empty()
        if PATH_SEPARATOR in mapped:
            return NamePathStrategy().find(source, mapped, fields)
        return _by_name(mapped, fields)


@dataclass(frozen=True, slots=True)
class PathStrategy(ConversionStrategy):
    """Follows a dotted path through raw (declared or instance) attributes."""

    def find(self, source: Any, name: str, fields: Sequence[ExtendedField]) -> ExtendedField:
        *parents, leaf = name.split(PATH_SEPARATOR)
        owner = source
        for segment in parents:
            if not _has_raw_field(owner, segment):
                return ExtendedField.empty()
            owner = get_field_value(owner, segment)
            if owner is None:
                return ExtendedField.empty()
        if not _has_raw_field(owner, leaf):
            return ExtendedField.empty()
        return field_of(owner, leaf)


@dataclass(frozen=True, slots=True)
class NamePathStrategy(ConversionStrategy):
    """Follows a dotted path resolving each segment like BasicNameStrategy would."""

    def find(self, source: Any, name: str, fields: Sequence[ExtendedField]) -> ExtendedField:
        *parents, leaf = name.split(PATH_SEPARATOR)
        owner = source
        for segment in parents:
            field = field_of(owner, segment)
            if not field.has_owner or field.is_static:
                return ExtendedField.empty()
            owner = field.value
            if owner is None:
                return ExtendedField.empty()
        field = field_of(owner, leaf)
        return ExtendedField.empty() if field.is_static else field


DEFAULT_STRATEGIES: tuple[ConversionStrategy, ...] = (
    BasicNameStrategy(),
    FieldNameMapStrategy(),
    PathStrategy(),
    NamePathStrategy(),
)


def default_strategies(field_names: Mapping[str, str] | None = None) -> tuple[ConversionStrategy, ...]:
    """The default strategy chain with ``field_names`` as the name-mapping table."""
    if not field_names:
        return DEFAULT_STRATEGIES
    return (BasicNameStrategy(), FieldNameMapStrategy.of(field_names), PathStrategy(), NamePathStrategy())


def find_source_field(
    strategies: Sequence[ConversionStrategy], source: Any, name: str, fields: Sequence[ExtendedField]
) -> ExtendedField:
    """Run ``strategies`` in order; the first reference with an owner wins."""
    for strategy in strategies:
        field = strategy.find(source, name, fields)
        if field.has_owner:
            return field
    return ExtendedField.empty()
