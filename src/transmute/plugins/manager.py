# src/transmute/plugins/manager.py
"""Plugin manager for handler and converter registration.

Uses pluggy for hook-based plugin registration.
"""

from typing import Any

import pluggy
import structlog

from transmute.contracts.simple_converters import SimpleConverter, SimpleConverters
from transmute.core.config import TransmuteSettings
from transmute.engine.configuration import Configuration
from transmute.engine.field_handler import FieldHandler
from transmute.engine.handlers import FIELD_HANDLERS
from transmute.engine.strategies import default_strategies
from transmute.plugins.hookspecs import (
    PROJECT_NAME,
    TransmuteConverterSpec,
    TransmuteHandlerSpec,
)

log = structlog.get_logger(__name__)


class PluginManager:
    """Collects plugin handlers and converters and builds Configurations from them.

    Usage:
        manager = PluginManager()
        manager.register(MoneyPlugin())

        configuration = manager.build_configuration()
        dto = convert(order, OrderDto, configuration=configuration)
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)

        self._pm.add_hookspecs(TransmuteHandlerSpec)
        self._pm.add_hookspecs(TransmuteConverterSpec)

        self._handlers: tuple[FieldHandler, ...] = ()
        self._converters: tuple[SimpleConverter, ...] = ()

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods

        Raises:
            ValueError: If the plugin contributes a handler class already registered
        """
        self._pm.register(plugin)
        self._refresh_caches()
        log.debug("Registered transmute plugin", plugin=self._pm.get_name(plugin))

    def register_entry_points(self) -> int:
        """Load plugins advertised under the ``transmute`` entry-point group.

        Returns:
            Number of plugins loaded
        """
        count = self._pm.load_setuptools_entrypoints(PROJECT_NAME)
        self._refresh_caches()
        return count

    def _refresh_caches(self) -> None:
        """Refresh handler and converter caches from hooks.

        Raises:
            ValueError: If two plugins contribute handlers of the same class
        """
        # pluggy returns results last-registered first
        new_handlers: dict[type[FieldHandler], FieldHandler] = {}
        for handlers in reversed(self._pm.hook.transmute_get_field_handlers()):
            for handler in handlers:
                handler_cls = type(handler)
                if handler_cls in new_handlers:
                    raise ValueError(f"Duplicate field handler: '{handler_cls.__name__}' is already registered")
                new_handlers[handler_cls] = handler

        new_converters: list[SimpleConverter] = []
        for converters in reversed(self._pm.hook.transmute_get_simple_converters()):
            new_converters.extend(SimpleConverters.of(*converters))

        self._handlers = tuple(new_handlers.values())
        self._converters = tuple(new_converters)

    def get_field_handlers(self) -> list[FieldHandler]:
        """Get all plugin field handlers, in registration order."""
        return list(self._handlers)

    def get_simple_converters(self) -> SimpleConverters:
        """Get all plugin simple converters, in registration order."""
        return SimpleConverters(self._converters)

    def build_configuration(self, settings: TransmuteSettings | None = None) -> Configuration:
        """Build a Configuration with plugin handlers ahead of the built-in chain.

        Args:
            settings: Deployment settings supplying inclusion policy and name mappings

        Returns:
            The configuration; the shared default when no plugin or setting customises it
        """
        handlers = [*self._handlers, *FIELD_HANDLERS]
        converters = self.get_simple_converters()
        if settings is not None:
            return settings.to_configuration(handlers=handlers, simple_converters=converters)
        return Configuration.of(
            handlers=handlers,
            strategies=default_strategies(),
            simple_converters=converters,
        )
