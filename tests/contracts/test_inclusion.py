# tests/contracts/test_inclusion.py
"""Tests for the excluded/expandable field policies."""

from typing import Any


class TestExcludedFields:
    """None excludes nothing, an empty tuple excludes everything."""

    def test_default_excludes_none(self) -> None:
        """The default policy never excludes."""
        from transmute.contracts.inclusion import ExcludedFields

        excluded = ExcludedFields()

        assert excluded.excludes_none
        assert not excluded.excludes_all
        assert not excluded.should_exclude("anything")

    def test_exclude_named(self) -> None:
        """Only the named fields are excluded."""
        from transmute.contracts.inclusion import ExcludedFields

        excluded = ExcludedFields.exclude("secret", "password")

        assert excluded.should_exclude("secret")
        assert excluded.should_exclude("password")
        assert not excluded.should_exclude("name")

    def test_exclude_all(self) -> None:
        """An empty name list excludes every field."""
        from transmute.contracts.inclusion import ExcludedFields

        excluded = ExcludedFields.exclude_all()

        assert excluded.excludes_all
        assert excluded.should_exclude("name")
        assert ExcludedFields.of([]) == excluded

    def test_missing_name_is_never_excluded(self) -> None:
        """A field reference without a name is never excluded."""
        from transmute.contracts.inclusion import ExcludedFields

        assert not ExcludedFields.exclude_all().should_exclude(None)

    def test_of_accepts_single_string(self) -> None:
        """A bare string is one name, not a sequence of characters."""
        from transmute.contracts.inclusion import ExcludedFields

        assert ExcludedFields.of("secret").names == ("secret",)

    def test_structural_equality(self) -> None:
        """Policies with the same names are equal and hash alike."""
        from transmute.contracts.inclusion import ExcludedFields

        first = ExcludedFields.of(["a", "b"])
        second = ExcludedFields.exclude("a", "b")

        assert first == second
        assert hash(first) == hash(second)
        assert ExcludedFields.exclude_none() == ExcludedFields()

    def test_str_describes_policy(self) -> None:
        """The textual form names the policy."""
        from transmute.contracts.inclusion import ExcludedFields

        assert str(ExcludedFields()) == "No excluded fields"
        assert str(ExcludedFields.exclude_all()) == "All fields are excluded"
        assert str(ExcludedFields.exclude("a")) == "Excluded fields: ['a']"


class TestExpandableFields:
    """None expands everything, an empty tuple expands nothing."""

    def test_default_expands_all(self) -> None:
        """The default policy expands every field."""
        from transmute.contracts.inclusion import ExpandableFields

        expandable = ExpandableFields()

        assert expandable.expands_all
        assert expandable.should_expand("lines")

    def test_expand_none(self) -> None:
        """An empty name list expands nothing."""
        from transmute.contracts.inclusion import ExpandableFields

        expandable = ExpandableFields.expand_none()

        assert expandable.expands_none
        assert not expandable.should_expand("lines")
        assert ExpandableFields.of([]) == expandable
        assert ExpandableFields.expand() == expandable

    def test_expand_named(self) -> None:
        """Only the named fields are expanded."""
        from transmute.contracts.inclusion import ExpandableFields

        expandable = ExpandableFields.expand("lines")

        assert expandable.should_expand("lines")
        assert not expandable.should_expand("notes")

    def test_should_not_expand_field_ignores_unmarked_fields(self) -> None:
        """Fields without the Expandable marker are always converted."""
        from transmute.contracts.inclusion import ExpandableFields
        from transmute.reflection.extended_field import ExtendedField

        plain = ExtendedField.of_attribute(object(), "lines", declared_type=list)

        assert not ExpandableFields.expand_none().should_not_expand_field(plain)

    def test_should_not_expand_field_reads_no_value(self) -> None:
        """Only name and markers are inspected, never the value."""
        from transmute.contracts.inclusion import ExpandableFields
        from transmute.contracts.markers import Expandable
        from transmute.reflection.extended_field import ExtendedField

        def exploding_reader(owner: Any) -> Any:
            raise AssertionError("value must not be read")

        field = ExtendedField(object(), "lines", markers=(Expandable(),), reader=exploding_reader)

        assert ExpandableFields.expand_none().should_not_expand_field(field)
        assert not ExpandableFields.expand("lines").should_not_expand_field(field)
        assert ExpandableFields.expand("notes").should_not_expand_field(field)

    def test_str_describes_policy(self) -> None:
        """The textual form names the policy."""
        from transmute.contracts.inclusion import ExpandableFields

        assert str(ExpandableFields()) == "All fields are expanded"
        assert str(ExpandableFields.expand_none()) == "No fields are expanded"
