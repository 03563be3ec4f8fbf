"""
Transmute: field-by-field conversion between unrelated Python object graphs.

Maps a source object onto a destination type without per-type-pair mapping
code, through an ordered chain of field handlers, a chain of field-resolution
strategies and an immutable Configuration. A sibling engine flattens any
object graph into nested dicts, lists and scalars.
"""

from transmute.contracts import (
    ConversionError,
    ConverterUsageError,
    ExcludedFields,
    Expandable,
    ExpandableFields,
    From,
    PropertyConversionError,
    ReflectionAccessError,
    SimpleConverter,
    SimpleConverters,
    Src,
    TransmuteError,
    expandable,
)
from transmute.engine import (
    Configuration,
    Converter,
    ObjectConverter,
    PropertyConversionEngine,
    clone_of,
    convert,
    convert_array,
    convert_from,
    convert_from_map,
    convert_iterable,
    convert_map,
    convert_to_map,
    copy_from,
    to_properties_map,
)

__version__ = "0.1.0"

__all__ = [
    "Configuration",
    "ConversionError",
    "Converter",
    "ConverterUsageError",
    "ExcludedFields",
    "Expandable",
    "ExpandableFields",
    "From",
    "ObjectConverter",
    "PropertyConversionEngine",
    "PropertyConversionError",
    "ReflectionAccessError",
    "SimpleConverter",
    "SimpleConverters",
    "Src",
    "TransmuteError",
    "__version__",
    "clone_of",
    "convert",
    "convert_array",
    "convert_from",
    "convert_from_map",
    "convert_iterable",
    "convert_map",
    "convert_to_map",
    "copy_from",
    "expandable",
    "to_properties_map",
]
