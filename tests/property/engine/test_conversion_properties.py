# tests/property/engine/test_conversion_properties.py
"""Property-based tests for conversions through the handler chain.

These tests verify invariants that must hold for any input:
- Text and integers convert into each other losslessly
- Element-wise pipelines preserve length and order
- Records survive a trip through a text-typed DTO
- Structurally equal configurations are equal and hash alike
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from tests.fixtures.models import Person, PersonDto
from tests.property.settings import DETERMINISM_SETTINGS, SLOW_SETTINGS, STANDARD_SETTINGS
from transmute.contracts.inclusion import ExcludedFields, ExpandableFields
from transmute.engine.configuration import Configuration
from transmute.engine.conversions import convert, convert_from
from transmute.engine.pipelines import convert_iterable

# =============================================================================
# Strategies
# =============================================================================

field_names = st.lists(st.from_regex(r"[a-z][a-z0-9_]{0,8}", fullmatch=True), max_size=5)


class TestScalarConversions:
    """Property tests for leaf conversions."""

    @given(value=st.integers())
    @STANDARD_SETTINGS
    def test_int_to_text_and_back(self, value: int) -> None:
        """Property: int -> str -> int is the identity."""
        text = convert_from(value, str)

        assert text == str(value)
        assert convert_from(text, int) == value

    @given(values=st.lists(st.integers(), max_size=20))
    @STANDARD_SETTINGS
    def test_pipeline_preserves_order(self, values: list[int]) -> None:
        """Property: element-wise conversion keeps length and order."""
        assert convert_iterable(values, str).to_list() == [str(value) for value in values]


class TestRecordConversions:
    """Property tests for whole-record conversion."""

    @given(name=st.text(max_size=20), age=st.integers(min_value=-(10**6), max_value=10**6))
    @SLOW_SETTINGS
    def test_person_through_dto(self, name: str, age: int) -> None:
        """Property: Person -> PersonDto -> Person reproduces the original."""
        person = Person(name=name, age=age)

        dto = convert(person, PersonDto)

        assert dto.age == str(age)
        assert convert(dto, Person) == person


class TestConfigurationEquality:
    """Property tests for structural configuration equality."""

    @given(excluded=field_names, expandable=field_names)
    @DETERMINISM_SETTINGS
    def test_equal_components_equal_configurations(self, excluded: list[str], expandable: list[str]) -> None:
        """Property: configurations from equal policies are equal and hash alike."""
        first = Configuration.of(
            excluded_fields=ExcludedFields.of(excluded),
            expandable_fields=ExpandableFields.of(expandable),
        )
        second = Configuration.of(
            excluded_fields=ExcludedFields.of(tuple(excluded)),
            expandable_fields=ExpandableFields.of(tuple(expandable)),
        )

        assert first == second
        assert hash(first) == hash(second)
