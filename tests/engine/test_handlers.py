# tests/engine/test_handlers.py
"""Tests for the built-in field handlers and the chain's order contract."""

import datetime
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import numpy as np
import pytest

from tests.fixtures.models import (
    Account,
    AccountDto,
    Article,
    Color,
    FloatDestination,
    IntDestination,
    Measurement,
    StrDestination,
    Tag,
    TagSource,
    Weather,
)


@dataclass
class Scalars:
    flag: bool = False
    day: datetime.date | None = None
    ident: uuid.UUID | None = None
    amount: Decimal | None = None
    blob: bytes | None = None
    text: str | None = None


@dataclass
class Tags:
    tags: list[str] = field(default_factory=list)


def convert(source: Any, destination: Any, **kwargs: Any) -> Any:
    from transmute.engine.conversions import convert as convert_impl

    return convert_impl(source, destination, **kwargs)


class TestAssignmentHandlers:
    """Same-type assignment, NumPy bridging and numeric widening."""

    def test_direct_assignment_keeps_instance(self) -> None:
        """A compatible value is assigned as-is, ahead of text conversion."""
        result = convert(TagSource(x=Tag("t")), StrDestination)

        assert type(result.x) is Tag

    def test_int_widens_to_float(self) -> None:
        """int -> float is a widening conversion."""
        result = convert({"x": 3}, FloatDestination)

        assert result.x == 3.0
        assert type(result.x) is float

    def test_float_does_not_narrow_to_int(self) -> None:
        """No built-in handler narrows float to int; the field is untouched."""
        result = convert({"x": 2.5}, IntDestination)

        assert result.x == 0

    def test_numpy_scalars_to_builtins(self) -> None:
        """NumPy scalars are unboxed into builtin fields."""
        result = convert({"value": np.float32(1.5), "count": np.int64(3)}, Measurement)

        assert result.value == 1.5
        assert type(result.value) is float
        assert result.count == 3
        assert type(result.count) is int


class TestTextHandlers:
    """Text bridges: enums, bytes and parsable types."""

    def test_enum_to_string_uses_name(self) -> None:
        """Enum members convert to their name."""
        assert convert({"x": Color.GREEN}, StrDestination).x == "GREEN"

    @pytest.mark.parametrize(
        ("source", "attribute", "expected"),
        [
            ({"flag": "yes"}, "flag", True),
            ({"flag": "false"}, "flag", False),
            ({"day": "2024-02-29"}, "day", datetime.date(2024, 2, 29)),
            (
                {"ident": "12345678-1234-5678-1234-567812345678"},
                "ident",
                uuid.UUID("12345678-1234-5678-1234-567812345678"),
            ),
            ({"amount": "1.10"}, "amount", Decimal("1.10")),
            ({"blob": "hi"}, "blob", b"hi"),
            ({"text": b"bytes"}, "text", "bytes"),
        ],
    )
    def test_text_round_trips(self, source: dict[str, Any], attribute: str, expected: Any) -> None:
        """Text parses into scalar fields and bytes decode into text."""
        assert getattr(convert(source, Scalars), attribute) == expected

    def test_unparsable_bool_raises(self) -> None:
        """An unknown boolean spelling fails the conversion."""
        from transmute.contracts.errors import ConversionError

        with pytest.raises(ConversionError):
            convert({"flag": "maybe"}, Scalars)

    def test_static_factory_from_text(self) -> None:
        """A classmethod taking str builds the destination."""
        from tests.fixtures.models import Celsius

        assert convert({"temperature": "21.5C"}, Weather).temperature == Celsius(21.5)

    def test_parse_bool(self) -> None:
        """Usual spellings parse; anything else raises."""
        from transmute.engine.handlers.text import parse_bool

        assert parse_bool(" ON ")
        assert not parse_bool("0")
        with pytest.raises(ValueError):
            parse_bool("perhaps")

    def test_to_text(self) -> None:
        """Enum names, decoded bytes and unboxed NumPy scalars."""
        from transmute.engine.handlers.text import to_text

        assert to_text(Color.RED) == "RED"
        assert to_text(bytearray(b"ab")) == "ab"
        assert to_text(np.int16(7)) == "7"
        assert to_text(1.5) == "1.5"


class TestFallbackHandlers:
    """Constructors, accessor beans and single values into collections."""

    def test_one_argument_constructor(self) -> None:
        """A constructor annotated with the source type is used."""
        result = convert({"slug": "Hello-World"}, Article)

        assert result.slug is not None
        assert result.slug.text == "hello-world"

    def test_getter_bean_to_dataclass(self) -> None:
        """get_/is_ accessors feed same-named destination fields."""
        result = convert(Account("ada", True), AccountDto)

        assert result.owner == "ada"
        assert result.active is True

    def test_dataclass_to_setter_bean(self) -> None:
        """Setters receive converted values."""
        result = convert(AccountDto(owner="bob", active=True), Account)

        assert result.get_owner() == "bob"

    def test_single_value_into_collection(self) -> None:
        """A scalar source becomes a one-element collection."""
        assert convert({"tags": "solo"}, Tags).tags == ["solo"]


class TestHandlerChainOrder:
    """Handlers run in order; the first CONVERTED or BREAK wins."""

    def test_custom_handler_ahead_of_defaults(self) -> None:
        """A caller handler placed first pre-empts the built-in chain."""
        from transmute.contracts.results import FieldHandlerResult
        from transmute.engine.configuration import Configuration
        from transmute.engine.field_handler import FieldHandler
        from transmute.engine.handlers import FIELD_HANDLERS

        class ShoutingStrings(FieldHandler):
            def source_type_constraint(self, cls: type) -> bool:
                return issubclass(cls, str)

            def destination_type_constraint(self, cls: type) -> bool:
                return issubclass(cls, str)

            def handle(self, source, destination, ctx) -> FieldHandlerResult:  # type: ignore[no-untyped-def]
                destination.set_value(source.value.upper())
                return FieldHandlerResult.CONVERTED

        configuration = Configuration.of(handlers=[ShoutingStrings(), *FIELD_HANDLERS])

        assert convert({"x": "quiet"}, StrDestination, configuration=configuration).x == "QUIET"
        assert convert({"x": "quiet"}, StrDestination).x == "quiet"

    def test_break_stops_chain_without_writing(self) -> None:
        """A BREAK result leaves the destination unchanged."""
        from transmute.contracts.results import FieldHandlerResult
        from transmute.engine.configuration import Configuration
        from transmute.engine.field_handler import FieldHandler
        from transmute.engine.handlers import FIELD_HANDLERS

        class Veto(FieldHandler):
            def handle(self, source, destination, ctx) -> FieldHandlerResult:  # type: ignore[no-untyped-def]
                return FieldHandlerResult.BREAK

        configuration = Configuration.of(handlers=[Veto(), *FIELD_HANDLERS])

        assert convert({"x": 1}, StrDestination, configuration=configuration).x is None

    def test_skip_passes_to_next_handler(self) -> None:
        """A SKIP result lets later handlers convert the field."""
        from transmute.contracts.results import FieldHandlerResult
        from transmute.engine.configuration import Configuration
        from transmute.engine.field_handler import FieldHandler
        from transmute.engine.handlers import FIELD_HANDLERS

        calls: list[str | None] = []

        class Observer(FieldHandler):
            def handle(self, source, destination, ctx) -> FieldHandlerResult:  # type: ignore[no-untyped-def]
                calls.append(destination.name)
                return FieldHandlerResult.SKIP

        configuration = Configuration.of(handlers=[Observer(), *FIELD_HANDLERS])

        assert convert({"x": 1}, StrDestination, configuration=configuration).x == "1"
        assert calls == ["x"]

    def test_handler_equality_by_class(self) -> None:
        """Handlers of the same class are equal regardless of binding."""
        from transmute.engine.configuration import Configuration
        from transmute.engine.handlers import AnyToString, DirectAssignment

        bound = AnyToString().bound_to(Configuration.defaults())

        assert bound == AnyToString()
        assert hash(bound) == hash(AnyToString())
        assert AnyToString() != DirectAssignment()
        assert repr(bound) == "AnyToString()"

    def test_default_field_handlers_is_fresh_copy(self) -> None:
        """The mutable copy can be edited without touching the defaults."""
        from transmute.engine.handlers import FIELD_HANDLERS, default_field_handlers

        handlers = default_field_handlers()
        handlers.clear()

        assert len(default_field_handlers()) == len(FIELD_HANDLERS)
