# src/transmute/contracts/markers.py
"""Field markers carried in ``typing.Annotated`` metadata.

Markers never change a field's type; they only steer conversion:

    @dataclass
    class Order:
        lines: Annotated[list[Line], Expandable()] = field(default_factory=list)
        customer: Annotated[str, Src("client_name")] = ""
        total: Annotated[Decimal, Src(sources=(From(Invoice, "amount.gross"),))] = Decimal(0)

Getters and properties, which cannot carry ``Annotated`` metadata on their
name, are marked with the ``expandable`` decorator instead.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

MARKERS_ATTRIBUTE = "__transmute_markers__"

F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class Expandable:
    """Marks a field whose conversion only happens when it is expanded.

    See ExpandableFields for how the expansion list is interpreted.
    """


@dataclass(frozen=True, slots=True)
class From:
    """Source-name override that applies only to one exact source class.

    Attributes:
        type: Exact runtime class of the source (subclasses do not match)
        path: Source field name or dotted path to read from
    """

    type: type
    path: str


@dataclass(frozen=True, slots=True)
class Src:
    """Overrides the source field name used for a destination field.

    ``sources`` entries are checked first, against the source's exact runtime
    class; ``name`` applies otherwise. With neither set, the destination
    field's own name is used.
    """

    name: str | None = None
    sources: tuple[From, ...] = ()

    def source_name(self, source: Any) -> str | None:
        """Return the override applicable to ``source``, if any."""
        source_class = type(source)
        for entry in self.sources:
            if entry.type is source_class:
                return entry.path
        return self.name


def expandable(target: F) -> F:
    """Mark a getter method or property as expandable.

    Works on plain functions (``get_items``) and on property objects, in
    either decorator order.
    """
    if isinstance(target, property):
        marked_getter = expandable(target.fget) if target.fget is not None else None
        return property(marked_getter, target.fset, target.fdel, target.__doc__)  # type: ignore[return-value]
    markers: tuple[Any, ...] = getattr(target, MARKERS_ATTRIBUTE, ())
    setattr(target, MARKERS_ATTRIBUTE, (*markers, Expandable()))
    return target


def callable_markers(member: Callable[..., Any] | property | None) -> tuple[Any, ...]:
    """Return markers attached to a getter function or property by decorators."""
    if member is None:
        return ()
    if isinstance(member, property):
        member = member.fget
    return tuple(getattr(member, MARKERS_ATTRIBUTE, ()))


def find_marker(markers: tuple[Any, ...], marker_type: type) -> Any:
    """Return the first marker of ``marker_type``, accepting the bare class too."""
    for marker in markers:
        if marker is marker_type or isinstance(marker, marker_type):
            return marker
    return None
