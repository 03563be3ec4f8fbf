# src/transmute/reflection/extended_field.py
"""Extended field reference: one field of one object for one conversion pass.

An ExtendedField bundles the owning instance with every way of reaching the
field (raw attribute, getter, setter, mapping key) and memoizes the derived
value, type and runtime class. Resolution priority for value/type/class:

1. the owning object's runtime value, when an owner is present and the value
   is not None
2. the getter
3. the raw attribute

Memo cells are computed on first access and never recomputed; only
``set_value`` replaces them. References are never shared across calls.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from functools import cached_property
from typing import Any

from transmute.contracts.errors import ReflectionAccessError
from transmute.contracts.markers import find_marker
from transmute.reflection.members import (
    AccessorInfo,
    enumerate_accessors,
    enumerate_fields,
    get_field_value,
    instance_field_names,
    runtime_type_bindings,
    set_field_value,
)
from transmute.reflection.types import (
    raw_class,
    raw_class_or_object,
    resolve_generic_argument,
    substitute_type_vars,
    type_name,
)


def _value_fits(value: Any, cls: type) -> bool:
    # Non-runtime protocols reject isinstance; trust the value there
    try:
        return isinstance(value, cls)
    except TypeError:
        return True


class ExtendedField:
    """A field reference with lazily computed, memoized value/type/class."""

    def __init__(
        self,
        owner: Any,
        name: str | None,
        *,
        declared_type: Any = Any,
        markers: tuple[Any, ...] = (),
        reader: Callable[[Any], Any] | None = None,
        writer: Callable[[Any, Any], None] | None = None,
        attribute: bool = True,
        entry: bool = False,
        is_static: bool = False,
    ) -> None:
        self._owner = owner
        self._name = name
        self._declared_type = declared_type
        self._markers = markers
        self._reader = reader
        self._writer = writer
        self._attribute = attribute and not entry
        self._entry = entry
        self._is_static = is_static

    @classmethod
    def empty(cls) -> ExtendedField:
        """A reference with neither owner nor field; never matches anything."""
        return cls(None, None, attribute=False)

    @classmethod
    def of_entry(cls, mapping: Mapping[Any, Any], key: str, *, declared_type: Any = Any) -> ExtendedField:
        """A reference to one key of a mapping."""
        return cls(mapping, key, declared_type=declared_type, entry=True)

    @classmethod
    def of_attribute(cls, owner: Any, name: str, *, declared_type: Any = Any) -> ExtendedField:
        return cls(owner, name, declared_type=declared_type)

    def with_accessor(self, accessor: AccessorInfo) -> ExtendedField:
        """Attach a getter/setter pair to this attribute-backed reference."""
        return ExtendedField(
            self._owner,
            self._name,
            declared_type=self._declared_type,
            markers=self._markers + accessor.markers,
            reader=accessor.read or self._reader,
            writer=accessor.write or self._writer,
            attribute=self._attribute,
            entry=self._entry,
            is_static=self._is_static,
        )

    @property
    def owner(self) -> Any:
        return self._owner

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def has_owner(self) -> bool:
        return self._owner is not None

    @property
    def has_field(self) -> bool:
        return self._name is not None

    @property
    def is_static(self) -> bool:
        return self._is_static

    @property
    def is_entry(self) -> bool:
        return self._entry

    @property
    def is_writable(self) -> bool:
        return self._entry or self._attribute or self._writer is not None

    @property
    def declared_type(self) -> Any:
        """The static type of the field, with Optional/Annotated removed."""
        return self._declared_type

    @property
    def markers(self) -> tuple[Any, ...]:
        return self._markers

    def marker(self, marker_type: type) -> Any:
        return find_marker(self._markers, marker_type)

    def has_marker(self, marker_type: type) -> bool:
        return self.marker(marker_type) is not None

    def generic_argument(self, index: int) -> Any:
        """Type argument ``index`` of the declared type, or None if absent."""
        return resolve_generic_argument(self._declared_type, index)

    @cached_property
    def value(self) -> Any:
        if self._owner is None or self._name is None:
            return None
        if self._entry:
            return self._owner.get(self._name)
        value = None
        if self._reader is not None:
            value = self._reader(self._owner)
        if value is None and self._attribute:
            value = get_field_value(self._owner, self._name)
        return value

    @cached_property
    def type(self) -> Any:
        """Runtime type of the value when present, otherwise the declared type.

        A value that is not an instance of a concrete declared class (an int
        default on a float field) reports the declared type instead.
        """
        if self._name is None:
            return object
        if self._owner is not None:
            value = self.value
            if value is not None:
                declared = raw_class(self._declared_type)
                if declared is None or declared is object or _value_fits(value, declared):
                    return type(value)
        return self._declared_type

    @cached_property
    def runtime_class(self) -> type:
        """Raw class of ``type``; ``object`` when it cannot be determined."""
        return raw_class_or_object(self.type)

    def set_value(self, value: Any) -> None:
        """Write ``value`` through the setter, mapping key or raw attribute.

        Raises:
            ReflectionAccessError: If the reference has no owner or no way to write
        """
        if self._owner is None or self._name is None:
            raise ReflectionAccessError("Cannot set a value on a field reference without owner")
        if self._entry:
            owner: MutableMapping[Any, Any] = self._owner
            owner[self._name] = value
        elif self._writer is not None:
            self._writer(self._owner, value)
        elif self._attribute:
            set_field_value(self._owner, self._name, value)
        else:
            raise ReflectionAccessError(
                f"Field {self._name!r} of {type(self._owner).__qualname__} is read-only",
                owner=type(self._owner),
                member=self._name,
            )
        self.__dict__["value"] = value
        self.__dict__.pop("type", None)
        self.__dict__.pop("runtime_class", None)

    def __repr__(self) -> str:
        owner = type(self._owner).__qualname__ if self._owner is not None else None
        parts = [f"name={self._name!r}", f"type={type_name(self._declared_type)}", f"owner={owner}"]
        if "value" in self.__dict__:
            parts.append(f"value={self.__dict__['value']!r}")
        return f"ExtendedField({', '.join(parts)})"


def fields_of(instance: Any, bindings: Mapping[str, Any] | None = None) -> list[ExtendedField]:
    """Enumerate every field reference of ``instance``.

    Mappings yield one reference per string key. Objects yield declared
    fields, then attributes found only on the instance, then accessor-only
    fields; a getter/setter with the same name as a field is attached to it.
    Declared types are resolved against the instance's runtime type bindings
    first and ``bindings`` second.
    """
    if instance is None:
        return []
    if isinstance(instance, Mapping):
        return [ExtendedField.of_entry(instance, key) for key in instance if isinstance(key, str)]
    type_bindings = {**(bindings or {}), **runtime_type_bindings(instance)}
    cls = type(instance)
    found: dict[str, ExtendedField] = {}
    for info in enumerate_fields(cls):
        found[info.name] = ExtendedField(
            instance,
            info.name,
            declared_type=substitute_type_vars(info.declared_type, type_bindings),
            markers=info.markers,
            is_static=info.is_static,
        )
    for name in instance_field_names(instance):
        if name not in found:
            found[name] = ExtendedField(instance, name)
    for accessor in enumerate_accessors(cls):
        existing = found.get(accessor.name)
        if existing is not None:
            found[accessor.name] = existing.with_accessor(accessor)
        else:
            found[accessor.name] = ExtendedField(
                instance,
                accessor.name,
                declared_type=substitute_type_vars(accessor.declared_type, type_bindings),
                markers=accessor.markers,
                reader=accessor.read,
                writer=accessor.write,
                attribute=False,
            )
    return list(found.values())


def field_of(instance: Any, name: str, bindings: Mapping[str, Any] | None = None) -> ExtendedField:
    """The reference named ``name`` on ``instance``, or an empty reference."""
    for field in fields_of(instance, bindings):
        if field.name == name:
            return field
    return ExtendedField.empty()
