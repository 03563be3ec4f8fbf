# tests/engine/test_converter.py
"""Tests for the fluent Converter builder."""

from dataclasses import dataclass

from tests.fixtures.models import (
    Address,
    Invoice,
    InvoiceDto,
    ItemsDestination,
    LazySource,
    Money,
    Person,
    PersonDto,
    money_to_text,
)


@dataclass
class Badge:
    label: str | None = None
    city: str | None = None


class TestConverterBuilder:
    """Each builder step returns a new, independent builder."""

    def test_plain_conversion_uses_defaults(self) -> None:
        """With no steps the default configuration is used."""
        from transmute.engine.configuration import Configuration
        from transmute.engine.converter import Converter

        converter = Converter(Person(name="Ada", age=3))

        assert converter.configuration() is Configuration.defaults()
        assert converter.to(PersonDto).age == "3"

    def test_steps_do_not_mutate(self) -> None:
        """exclude() leaves the original builder untouched."""
        from transmute.engine.converter import Converter

        base = Converter(Person(name="Ada"))
        narrowed = base.exclude("name")

        assert base.to(PersonDto).name == "Ada"
        assert narrowed.to(PersonDto).name is None

    def test_exclude_accumulates(self) -> None:
        """Repeated exclude() calls add names."""
        from transmute.engine.converter import Converter

        result = Converter(Person(name="Ada", age=3)).exclude("name").exclude("age").to(PersonDto)

        assert result.name is None
        assert result.age is None
        assert result.secret == "s3cret"

    def test_exclude_all(self) -> None:
        """Every destination field keeps its initial value."""
        from transmute.engine.converter import Converter

        assert Converter(Person(name="Ada")).exclude_all().to(PersonDto) == PersonDto()

    def test_expand_none_skips_getter(self) -> None:
        """expand() with no names expands nothing and never reads the getter."""
        from transmute.engine.converter import Converter

        source = LazySource()

        result = Converter(source).expand().to(ItemsDestination)

        assert result.items == []
        assert source.calls == 0

    def test_expand_named(self) -> None:
        """Named expandable fields convert."""
        from transmute.engine.converter import Converter

        source = LazySource()

        assert Converter(source).expand("items").to(ItemsDestination).items == ["a", "b"]
        assert source.calls == 1

    def test_with_converter(self) -> None:
        """A simple converter handles its class pair."""
        from transmute.engine.converter import Converter

        invoice = Invoice(total=Money(cents=1250))

        assert Converter(invoice).with_converter(money_to_text).to(InvoiceDto).total == "12.50"

    def test_with_field_names(self) -> None:
        """Destination names map to source names and dotted paths."""
        from transmute.engine.converter import Converter

        person = Person(name="Ada", address=Address(city="Oslo"))

        result = Converter(person).with_field_names({"label": "name"}, city="address.city").to(Badge)

        assert result == Badge(label="Ada", city="Oslo")

    def test_with_extra_composes(self) -> None:
        """Extra callbacks run in the order they were added."""
        from transmute.engine.converter import Converter

        def first(source: Person, destination: PersonDto) -> None:
            destination.name = "first"

        def second(source: Person, destination: PersonDto) -> None:
            destination.name = f"{destination.name}+second"

        result = Converter(Person(name="Ada")).with_extra(first).with_extra(second).to(PersonDto)

        assert result.name == "first+second"

    def test_into_existing_instance(self) -> None:
        """into() populates and returns the given destination."""
        from transmute.engine.converter import Converter

        destination = PersonDto(name="old")

        result = Converter(Person(name="Ada")).into(destination)

        assert result is destination
        assert destination.name == "Ada"

    def test_builders_compare_by_value(self) -> None:
        """Builders with the same steps are equal."""
        from transmute.engine.converter import Converter

        source = Person()

        assert Converter(source).exclude("a") == Converter(source).exclude("a")
        assert Converter(source).with_field_names(b="c") == Converter(source).with_field_names({"b": "c"})
