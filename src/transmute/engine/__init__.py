# src/transmute/engine/__init__.py
"""The conversion engine: configuration, handler and strategy chains, entry points.

Import order matters inside this package: Configuration depends on the
handler classes, and the handlers reach the conversion entry points lazily.
"""

from transmute.engine.configuration import Configuration
from transmute.engine.conversions import (
    clone_of,
    compose,
    convert,
    convert_enveloped_from,
    convert_from,
    convert_into,
    copy_from,
)
from transmute.engine.converter import Converter
from transmute.engine.field_handler import FieldHandler, FieldHandlerContext
from transmute.engine.handlers import FIELD_HANDLERS, default_field_handlers
from transmute.engine.object_converter import ObjectConverter
from transmute.engine.pipelines import (
    ArrayConversionPipeline,
    IterableConversionPipeline,
    MapConversionPipeline,
    convert_array,
    convert_from_map,
    convert_iterable,
    convert_map,
    convert_to_map,
    map_iterable,
    to_properties_map,
)
from transmute.engine.properties import PropertyConversionEngine
from transmute.engine.strategies import (
    DEFAULT_STRATEGIES,
    BasicNameStrategy,
    ConversionStrategy,
    FieldNameMapStrategy,
    NamePathStrategy,
    PathStrategy,
    default_strategies,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "FIELD_HANDLERS",
    "ArrayConversionPipeline",
    "BasicNameStrategy",
    "Configuration",
    "ConversionStrategy",
    "Converter",
    "FieldHandler",
    "FieldHandlerContext",
    "FieldNameMapStrategy",
    "IterableConversionPipeline",
    "MapConversionPipeline",
    "NamePathStrategy",
    "ObjectConverter",
    "PathStrategy",
    "PropertyConversionEngine",
    "clone_of",
    "compose",
    "convert",
    "convert_array",
    "convert_enveloped_from",
    "convert_from",
    "convert_from_map",
    "convert_into",
    "convert_iterable",
    "convert_map",
    "convert_to_map",
    "copy_from",
    "default_field_handlers",
    "default_strategies",
    "map_iterable",
    "to_properties_map",
]
