# src/transmute/contracts/inclusion.py
"""Field-inclusion policy: excluded and expandable field sets.

Both are immutable value objects compared structurally, so a Configuration
built from equal policies compares equal to the canonical default.

Excluded fields:
    None        -> exclude none (default)
    ()          -> exclude all
    ("a", "b")  -> exclude exactly those names

Expandable fields:
    None        -> expand all (default)
    ()          -> expand none
    ("a", "b")  -> expand exactly those names
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from transmute.contracts.markers import Expandable

if TYPE_CHECKING:
    from transmute.reflection.extended_field import ExtendedField


def _names(names: Iterable[str] | None) -> tuple[str, ...] | None:
    if names is None:
        return None
    if isinstance(names, str):
        return (names,)
    return tuple(names)


@dataclass(frozen=True, slots=True)
class ExcludedFields:
    """Names of destination fields conversion must never write."""

    names: tuple[str, ...] | None = None

    @classmethod
    def of(cls, names: Iterable[str] | None) -> ExcludedFields:
        return cls(_names(names))

    @classmethod
    def exclude(cls, *names: str) -> ExcludedFields:
        """Exclude the given names; called with no names it excludes all."""
        return cls(tuple(names))

    @classmethod
    def exclude_all(cls) -> ExcludedFields:
        return cls(())

    @classmethod
    def exclude_none(cls) -> ExcludedFields:
        return cls(None)

    @property
    def excludes_all(self) -> bool:
        return self.names is not None and not self.names

    @property
    def excludes_none(self) -> bool:
        return self.names is None

    def should_exclude(self, name: str | None) -> bool:
        if self.names is None or name is None:
            return False
        return not self.names or name in self.names

    def __str__(self) -> str:
        if self.names is None:
            return "No excluded fields"
        if not self.names:
            return "All fields are excluded"
        return f"Excluded fields: {list(self.names)}"


@dataclass(frozen=True, slots=True)
class ExpandableFields:
    """Names of expandable-marked fields that are actually converted."""

    names: tuple[str, ...] | None = None

    @classmethod
    def of(cls, names: Iterable[str] | None) -> ExpandableFields:
        return cls(_names(names))

    @classmethod
    def expand(cls, *names: str) -> ExpandableFields:
        """Expand exactly the given names; called with no names it expands none."""
        return cls(tuple(names))

    @classmethod
    def expand_all(cls) -> ExpandableFields:
        return cls(None)

    @classmethod
    def expand_none(cls) -> ExpandableFields:
        return cls(())

    @property
    def expands_all(self) -> bool:
        return self.names is None

    @property
    def expands_none(self) -> bool:
        return self.names is not None and not self.names

    def should_expand(self, name: str | None) -> bool:
        if self.names is None:
            return True
        return name in self.names

    def should_not_expand_field(self, field: ExtendedField) -> bool:
        """True when ``field`` is expandable and not selected for expansion.

        Only the field's name and markers are inspected; its value is never read.
        """
        return is_expandable(field) and not self.should_expand(field.name)

    def __str__(self) -> str:
        if self.names is None:
            return "All fields are expanded"
        if not self.names:
            return "No fields are expanded"
        return f"Expanded fields: {list(self.names)}"


def is_expandable(field: ExtendedField) -> bool:
    return field.has_marker(Expandable)

