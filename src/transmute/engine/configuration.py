# src/transmute/engine/configuration.py
"""Immutable conversion configuration.

A Configuration bundles six components:

- the caller's ordered field-handler list
- the ordered field-resolution strategy list
- the excluded-fields policy
- the expandable-fields policy
- the simple-converter registry
- the generic type-binding table (type-parameter name -> concrete type)

Two configurations are equal when all six components are equal. Building a
configuration that equals the canonical default returns the shared default
instance, so the default handler chain is assembled only once per process.

The assembled handler chain depends on whether the configuration is custom:

    default: caller handlers + AnyToAny
    custom:  before-default handlers + caller handlers + AnyToAny,
             every one of them bound to this configuration
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

import structlog

from transmute.contracts.inclusion import ExcludedFields, ExpandableFields
from transmute.contracts.simple_converters import SimpleConverters
from transmute.engine.field_handler import FieldHandler
from transmute.engine.handlers import FIELD_HANDLERS, HANDLERS_AFTER_DEFAULT, HANDLERS_BEFORE_DEFAULT
from transmute.engine.strategies import DEFAULT_STRATEGIES, ConversionStrategy
from transmute.reflection.types import bind_type_arguments, is_parameterized, substitute_type_vars, type_name

log = structlog.get_logger(__name__)

_default_lock = threading.Lock()
_default: Configuration | None = None


class Configuration:
    """Immutable bundle of handlers, strategies, inclusion policy and type bindings."""

    __slots__ = (
        "_excluded_fields",
        "_expandable_fields",
        "_field_handlers",
        "_generic_types",
        "_handlers",
        "_simple_converters",
        "_strategies",
    )

    def __init__(
        self,
        handlers: Sequence[FieldHandler] = FIELD_HANDLERS,
        strategies: Sequence[ConversionStrategy] = DEFAULT_STRATEGIES,
        excluded_fields: ExcludedFields | None = None,
        expandable_fields: ExpandableFields | None = None,
        simple_converters: SimpleConverters | None = None,
        generic_types: Mapping[str, Any] | None = None,
    ) -> None:
        self._handlers = tuple(handlers)
        self._strategies = tuple(strategies)
        self._excluded_fields = excluded_fields if excluded_fields is not None else ExcludedFields()
        self._expandable_fields = expandable_fields if expandable_fields is not None else ExpandableFields()
        self._simple_converters = simple_converters if simple_converters is not None else SimpleConverters()
        self._generic_types: Mapping[str, Any] = MappingProxyType(dict(generic_types or {}))
        self._field_handlers = self._assemble()

    def _assemble(self) -> tuple[FieldHandler, ...]:
        if not self.is_custom:
            return (*self._handlers, *(handler() for handler in HANDLERS_AFTER_DEFAULT))
        before = tuple(handler(self) for handler in HANDLERS_BEFORE_DEFAULT)
        middle = tuple(handler.bound_to(self) for handler in self._handlers)
        after = tuple(handler(self) for handler in HANDLERS_AFTER_DEFAULT)
        log.debug(
            "Assembled custom handler chain",
            handlers=len(before) + len(middle) + len(after),
            excluded=str(self._excluded_fields),
            expandable=str(self._expandable_fields),
            bindings=sorted(self._generic_types),
        )
        return (*before, *middle, *after)

    @classmethod
    def defaults(cls) -> Configuration:
        """The process-wide canonical default configuration."""
        global _default
        if _default is None:
            with _default_lock:
                if _default is None:
                    _default = cls()
        return _default

    @classmethod
    def of(
        cls,
        handlers: Sequence[FieldHandler] | None = None,
        strategies: Sequence[ConversionStrategy] | None = None,
        excluded_fields: ExcludedFields | None = None,
        expandable_fields: ExpandableFields | None = None,
        simple_converters: SimpleConverters | None = None,
        bound_type: Any = None,
    ) -> Configuration:
        """Build a configuration, returning the canonical default when equal to it.

        Args:
            handlers: Caller handler list (defaults to the built-in chain)
            strategies: Field-resolution strategies (defaults to the built-in chain)
            excluded_fields: Excluded-fields policy (defaults to exclude none)
            expandable_fields: Expandable-fields policy (defaults to expand all)
            simple_converters: Simple-converter registry (defaults to empty)
            bound_type: Parameterized destination type whose type arguments
                seed the binding table

        Returns:
            The new configuration, or the shared default when structurally equal
        """
        generic_types = bind_type_arguments(bound_type) if bound_type is not None else {}
        configuration = cls(
            FIELD_HANDLERS if handlers is None else handlers,
            DEFAULT_STRATEGIES if strategies is None else strategies,
            excluded_fields,
            expandable_fields,
            simple_converters,
            generic_types,
        )
        default = cls.defaults()
        return default if configuration == default else configuration

    @classmethod
    def copy_with(cls, tp: Any, original: Configuration) -> Configuration:
        """Derive a configuration binding the type parameters of ``tp``.

        The handler and strategy lists are shared with ``original``; the
        binding table is extended with ``tp``'s type arguments (themselves
        resolved against the original table). Non-generic types return
        ``original`` unchanged.
        """
        if not is_parameterized(tp):
            return original
        resolved = substitute_type_vars(tp, original.generic_types)
        bindings = bind_type_arguments(resolved)
        if not bindings:
            return original
        merged = {**original.generic_types, **bindings}
        if merged == dict(original.generic_types):
            return original
        log.debug("Bound generic type arguments", type=type_name(resolved), bindings=sorted(bindings))
        return cls(
            original._handlers,
            original._strategies,
            original._excluded_fields,
            original._expandable_fields,
            original._simple_converters,
            merged,
        )

    @property
    def handlers(self) -> tuple[FieldHandler, ...]:
        """The caller's handler list, as given."""
        return self._handlers

    @property
    def field_handlers(self) -> tuple[FieldHandler, ...]:
        """The assembled handler chain the converter runs."""
        return self._field_handlers

    @property
    def strategies(self) -> tuple[ConversionStrategy, ...]:
        return self._strategies

    @property
    def excluded_fields(self) -> ExcludedFields:
        return self._excluded_fields

    @property
    def expandable_fields(self) -> ExpandableFields:
        return self._expandable_fields

    @property
    def simple_converters(self) -> SimpleConverters:
        return self._simple_converters

    @property
    def generic_types(self) -> Mapping[str, Any]:
        return self._generic_types

    def generic_type(self, name: str) -> Any:
        """The type bound to type-parameter ``name``, or None."""
        return self._generic_types.get(name)

    @property
    def is_custom(self) -> bool:
        """True when any inclusion policy or converter is set, or any type is bound."""
        return (
            not self._excluded_fields.excludes_none
            or not self._expandable_fields.expands_all
            or self._simple_converters.has_converters
            or bool(self._generic_types)
        )

    def is_default(self) -> bool:
        return self == Configuration.defaults()

    def with_handlers(self, handlers: Iterable[FieldHandler]) -> Configuration:
        return self._replace(handlers=tuple(handlers))

    def with_excluded_fields(self, excluded_fields: ExcludedFields) -> Configuration:
        return self._replace(excluded_fields=excluded_fields)

    def with_expandable_fields(self, expandable_fields: ExpandableFields) -> Configuration:
        return self._replace(expandable_fields=expandable_fields)

    def with_simple_converters(self, simple_converters: SimpleConverters) -> Configuration:
        return self._replace(simple_converters=simple_converters)

    def _replace(self, **changes: Any) -> Configuration:
        components: dict[str, Any] = {
            "handlers": self._handlers,
            "strategies": self._strategies,
            "excluded_fields": self._excluded_fields,
            "expandable_fields": self._expandable_fields,
            "simple_converters": self._simple_converters,
            "generic_types": self._generic_types,
        }
        components.update(changes)
        configuration = Configuration(**components)
        default = Configuration.defaults()
        return default if configuration == default else configuration

    def _key(self) -> tuple[Any, ...]:
        return (
            self._handlers,
            self._strategies,
            self._excluded_fields,
            self._expandable_fields,
            self._simple_converters,
            frozenset(self._generic_types.items()),
        )

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Configuration):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"Configuration(handlers={len(self._handlers)}, strategies={len(self._strategies)}, "
            f"excluded={self._excluded_fields}, expandable={self._expandable_fields}, "
            f"simple_converters={len(self._simple_converters)}, generic_types={dict(self._generic_types)})"
        )
