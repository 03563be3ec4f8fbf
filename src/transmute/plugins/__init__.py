# src/transmute/plugins/__init__.py
"""Plugin system: extra field handlers and simple converters via pluggy."""

from transmute.plugins.hookspecs import PROJECT_NAME, hookimpl, hookspec
from transmute.plugins.manager import PluginManager

__all__ = [
    "PROJECT_NAME",
    "PluginManager",
    "hookimpl",
    "hookspec",
]
