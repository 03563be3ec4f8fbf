# src/transmute/plugins/hookspecs.py
"""pluggy hook specifications for transmute plugins.

Plugins contribute field handlers and simple converters that every
Configuration built by the plugin manager picks up.

Usage (implementing a plugin):
    from transmute.plugins.hookspecs import hookimpl

    class MoneyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def transmute_get_simple_converters(self):
            return [money_to_text]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from transmute.contracts.simple_converters import SimpleConverter
    from transmute.engine.field_handler import FieldHandler

# Project name for pluggy (also the entry-point group)
PROJECT_NAME = "transmute"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class TransmuteHandlerSpec:
    """Hook specifications for field-handler plugins."""

    @hookspec
    def transmute_get_field_handlers(self) -> list["FieldHandler"]:  # type: ignore[empty-body]
        """Return field handler instances.

        They run ahead of the built-in handler chain, in registration order.

        Returns:
            List of FieldHandler instances (not classes)
        """


class TransmuteConverterSpec:
    """Hook specifications for simple-converter plugins."""

    @hookspec
    def transmute_get_simple_converters(self) -> list["SimpleConverter | Callable[[Any], Any]"]:  # type: ignore[empty-body]
        """Return simple converters.

        Plain callables must annotate their parameter and return types.

        Returns:
            List of SimpleConverter instances or annotated one-argument callables
        """
