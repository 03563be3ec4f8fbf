# src/transmute/engine/handlers/text.py
"""Handlers bridging text with enums, bytes and text-parsable types."""

from __future__ import annotations

import datetime
import enum
import numbers
import uuid
from collections.abc import Callable
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from typing import Any

import numpy as np

from transmute.contracts.results import FieldHandlerResult
from transmute.engine.field_handler import FieldHandler, FieldHandlerContext
from transmute.reflection.extended_field import ExtendedField
from transmute.reflection.members import converter_methods

_TRUE_TEXT = frozenset({"true", "1", "yes", "on"})
_FALSE_TEXT = frozenset({"false", "0", "no", "off"})


def parse_bool(text: str) -> bool:
    """Parse a boolean from its usual textual spellings.

    Raises:
        ValueError: If ``text`` is not a recognised boolean spelling
    """
    lowered = text.strip().lower()
    if lowered in _TRUE_TEXT:
        return True
    if lowered in _FALSE_TEXT:
        return False
    raise ValueError(f"Cannot parse a boolean from {text!r}")


def text_parser(cls: type) -> Callable[[str], Any] | None:
    """Builtin parser producing ``cls`` from text, or None if there is none."""
    if issubclass(cls, np.bool_):
        return lambda text: cls(parse_bool(text))
    if issubclass(cls, bool):
        return parse_bool
    if issubclass(cls, datetime.date | datetime.time):
        return cls.fromisoformat
    if issubclass(cls, numbers.Number | np.generic | Decimal | Fraction | uuid.UUID | PurePath):
        return cls
    return None


def to_text(value: Any) -> str:
    """Textual form of a value: enum names, decoded bytes, otherwise ``str``."""
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).decode("utf-8")
    if isinstance(value, np.generic):
        return str(value.item())
    return str(value)


def enum_member(cls: type[enum.Enum], text: str) -> enum.Enum:
    """Look an enum member up by name, then by value.

    Raises:
        ValueError: If ``text`` is neither a member name nor a member value
    """
    try:
        return cls[text]
    except KeyError:
        return cls(text)


class CharSequenceToEnum(FieldHandler):
    """Converts text to an enum member.

    Static factories on the enum that take a ``str`` are tried first; then the
    member is looked up by name, then by value. An unknown name raises.
    """

    def source_type_constraint(self, cls: type) -> bool:
        return issubclass(cls, str)

    def destination_type_constraint(self, cls: type) -> bool:
        return issubclass(cls, enum.Enum)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK
        destination_class = ctx.destination_class(destination)
        for factory in converter_methods(destination_class, type(value)):
            converted = factory(value)
            if converted is not None:
                destination.set_value(converted)
                return FieldHandlerResult.CONVERTED
        destination.set_value(enum_member(destination_class, value))
        return FieldHandlerResult.CONVERTED


class AnyToString(FieldHandler):
    """Converts any value to ``str`` (enums by name, bytes decoded as UTF-8)."""

    def destination_type_constraint(self, cls: type) -> bool:
        return issubclass(cls, str) and not issubclass(cls, enum.Enum)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.SKIP
        destination_class = ctx.destination_class(destination)
        text = to_text(value)
        destination.set_value(text if destination_class is str else destination_class(text))
        return FieldHandlerResult.CONVERTED


class AnyToBytes(FieldHandler):
    """Converts any value to ``bytes``/``bytearray``; text is encoded as UTF-8."""

    def destination_type_constraint(self, cls: type) -> bool:
        return issubclass(cls, bytes | bytearray)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        value = source.value
        if value is None:
            return FieldHandlerResult.SKIP
        destination_class = ctx.destination_class(destination)
        if isinstance(value, bytes | bytearray | memoryview):
            destination.set_value(destination_class(value))
        else:
            destination.set_value(destination_class(to_text(value).encode("utf-8")))
        return FieldHandlerResult.CONVERTED


class CharSequenceToAnyFromFactory(FieldHandler):
    """Builds the destination from text via a factory.

    User factories (static/class methods of the destination taking ``str``)
    are tried first, then the builtin parser for the destination type
    (numbers, UUID, paths, ISO dates and times, booleans).
    """

    def source_type_constraint(self, cls: type) -> bool:
        return issubclass(cls, str)

    def destination_type_constraint(self, cls: type) -> bool:
        return not issubclass(cls, str | enum.Enum)

    def handle(self, source: ExtendedField, destination: ExtendedField, ctx: FieldHandlerContext) -> FieldHandlerResult:
        destination_class = ctx.destination_class(destination)
        factories: list[Callable[[Any], Any]] = list(converter_methods(destination_class, str))
        parser = text_parser(destination_class)
        if parser is not None:
            factories.append(parser)
        value = source.value
        if value is None:
            return FieldHandlerResult.BREAK if factories else FieldHandlerResult.SKIP
        for factory in factories:
            converted = factory(value)
            if converted is not None:
                destination.set_value(converted)
                return FieldHandlerResult.CONVERTED
        return FieldHandlerResult.SKIP
