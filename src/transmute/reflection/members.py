# src/transmute/reflection/members.py
"""Reflection primitives: enumerate, read, write and construct.

These are the only places the engine touches attributes directly. Every
other module goes through ExtendedField, which is built on top of the
functions here.

Naming convention for accessors:
    readers: get_x / getX / is_x / isX (no required arguments), property fget
    writers: set_x / setX (one required argument), property fset
"""

from __future__ import annotations

import contextlib
import dataclasses
import functools
import inspect
import operator
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, get_origin

import pydantic

from transmute.contracts.errors import ReflectionAccessError
from transmute.contracts.markers import callable_markers
from transmute.reflection.types import (
    _UNION_ORIGINS,
    annotated_metadata,
    bind_type_arguments,
    is_class_var,
    is_parameterized,
    raw_class,
    strip_annotated,
    type_name,
    unwrap_declared,
)

GETTER_PREFIXES: tuple[str, ...] = ("get", "is")
SETTER_PREFIXES: tuple[str, ...] = ("set",)

# Bases whose own members are framework plumbing, not user fields.
_SKIPPED_BASES: frozenset[type] = frozenset({object, Generic, Protocol, pydantic.BaseModel})  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class FieldInfo:
    """A declared field of a class.

    Attributes:
        name: Attribute name
        declared_type: Annotation with Annotated/Optional/ClassVar stripped
        markers: Annotated metadata attached to the annotation
        declaring_class: First class in the MRO that declares the field
        is_static: True for ClassVar annotations
    """

    name: str
    declared_type: Any
    markers: tuple[Any, ...]
    declaring_class: type
    is_static: bool = False


@dataclass(frozen=True, slots=True)
class AccessorInfo:
    """A getter/setter pair derived from methods or a property.

    ``read`` takes the owner; ``write`` takes the owner and the new value.
    """

    name: str
    read: Callable[[Any], Any] | None
    write: Callable[[Any, Any], None] | None
    declared_type: Any
    markers: tuple[Any, ...]
    declaring_class: type


def is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def accessor_field_name(method_name: str, prefixes: tuple[str, ...]) -> str | None:
    """Derive the field name from an accessor name, or None if it is not one.

    >>> accessor_field_name("get_total", GETTER_PREFIXES)
    'total'
    >>> accessor_field_name("isActive", GETTER_PREFIXES)
    'active'
    """
    for prefix in prefixes:
        snake = prefix + "_"
        if method_name.startswith(snake) and len(method_name) > len(snake):
            return method_name[len(snake) :]
        if method_name.startswith(prefix) and len(method_name) > len(prefix) and method_name[len(prefix)].isupper():
            rest = method_name[len(prefix) :]
            return rest[0].lower() + rest[1:]
    return None


def _resolve_string(annotation: Any, owner: Any) -> Any:
    """Resolve one string annotation in the namespace of ``owner``.

    Names that cannot be resolved degrade to ``Any`` so one bad annotation
    does not hide the rest of the class.
    """
    if not isinstance(annotation, str):
        return annotation
    module = inspect.getmodule(owner)
    globalns = dict(vars(module)) if module is not None else {}
    localns = dict(vars(owner)) if isinstance(owner, type) else None

    def holder() -> None:
        pass

    holder.__annotations__ = {"annotation": annotation}
    try:
        return typing.get_type_hints(holder, globalns=globalns, localns=localns, include_extras=True)["annotation"]
    except (NameError, TypeError, AttributeError, SyntaxError):
        return Any


def _class_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError, AttributeError, SyntaxError):
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            for name, annotation in inspect.get_annotations(klass).items():
                hints[name] = _resolve_string(annotation, klass)
        return hints


def function_hints(func: Callable[..., Any]) -> dict[str, Any]:
    """Resolved annotations of a function; unresolvable ones degrade to Any."""
    try:
        return typing.get_type_hints(func, include_extras=True)
    except (NameError, TypeError, AttributeError, SyntaxError):
        return {name: _resolve_string(value, func) for name, value in inspect.get_annotations(func).items()}


def _markers(hint: Any) -> tuple[Any, ...]:
    markers = annotated_metadata(hint)
    inner = strip_annotated(hint)
    if get_origin(inner) in _UNION_ORIGINS or get_origin(inner) is typing.ClassVar:
        for arg in typing.get_args(inner):
            markers += annotated_metadata(arg)
    return markers


def _own_field_names(klass: type) -> list[str]:
    names = list(inspect.get_annotations(klass))
    slots = vars(klass).get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    names.extend(name for name in slots if name not in names)
    return names


@functools.lru_cache(maxsize=1024)
def enumerate_fields(cls: type) -> tuple[FieldInfo, ...]:
    """Declared fields of ``cls``, class before superclass, first declaration wins."""
    hints = _class_hints(cls)
    seen: set[str] = set()
    fields: list[FieldInfo] = []
    for klass in cls.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        for name in _own_field_names(klass):
            if name in seen or is_dunder(name):
                continue
            seen.add(name)
            hint = hints.get(name, Any)
            if isinstance(hint, dataclasses.InitVar):
                continue
            fields.append(
                FieldInfo(
                    name=name,
                    declared_type=unwrap_declared(hint),
                    markers=_markers(hint),
                    declaring_class=klass,
                    is_static=is_class_var(hint),
                )
            )
    return tuple(fields)


def instance_field_names(instance: Any) -> list[str]:
    """Attribute names stored on the instance itself (``__dict__``)."""
    try:
        names = vars(instance)
    except TypeError:
        return []
    return [name for name in names if isinstance(name, str) and not is_dunder(name)]


def _required_positional(func: Callable[..., Any], *, bound: bool) -> int | None:
    try:
        parameters = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return None
    if bound and parameters:
        parameters = parameters[1:]
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    required = [p for p in parameters if p.kind in positional and p.default is inspect.Parameter.empty]
    if any(p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty for p in parameters):
        return None
    return len(required)


def _method_reader(attr_name: str) -> Callable[[Any], Any]:
    return operator.methodcaller(attr_name)


def _method_writer(attr_name: str) -> Callable[[Any, Any], None]:
    def write(instance: Any, value: Any) -> None:
        getattr(instance, attr_name)(value)

    return write


def _attribute_writer(attr_name: str) -> Callable[[Any, Any], None]:
    def write(instance: Any, value: Any) -> None:
        setattr(instance, attr_name, value)

    return write


@functools.lru_cache(maxsize=1024)
def enumerate_accessors(cls: type) -> tuple[AccessorInfo, ...]:
    """Getter/setter accessors of ``cls``, class before superclass."""
    readers: dict[str, tuple[Callable[[Any], Any], Any, tuple[Any, ...], type]] = {}
    writers: dict[str, tuple[Callable[[Any, Any], None], Any, type]] = {}
    order: list[str] = []

    def remember(name: str) -> None:
        if name not in order:
            order.append(name)

    for klass in cls.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        for attr_name, member in vars(klass).items():
            if is_dunder(attr_name):
                continue
            if isinstance(member, property):
                if member.fget is not None and attr_name not in readers:
                    hints = function_hints(member.fget)
                    readers[attr_name] = (
                        operator.attrgetter(attr_name),
                        hints.get("return", Any),
                        callable_markers(member),
                        klass,
                    )
                    remember(attr_name)
                if member.fset is not None and attr_name not in writers:
                    writers[attr_name] = (_attribute_writer(attr_name), Any, klass)
                    remember(attr_name)
            elif isinstance(member, functools.cached_property):
                if attr_name not in readers:
                    hints = function_hints(member.func)
                    readers[attr_name] = (
                        operator.attrgetter(attr_name),
                        hints.get("return", Any),
                        callable_markers(member.func),
                        klass,
                    )
                    remember(attr_name)
            elif inspect.isfunction(member):
                reader_name = accessor_field_name(attr_name, GETTER_PREFIXES)
                if reader_name and reader_name not in readers and _required_positional(member, bound=True) == 0:
                    hints = function_hints(member)
                    readers[reader_name] = (
                        _method_reader(attr_name),
                        hints.get("return", Any),
                        callable_markers(member),
                        klass,
                    )
                    remember(reader_name)
                writer_name = accessor_field_name(attr_name, SETTER_PREFIXES)
                if writer_name and writer_name not in writers and _required_positional(member, bound=True) == 1:
                    hints = function_hints(member)
                    params = [name for name in hints if name != "return"]
                    writers[writer_name] = (
                        _method_writer(attr_name),
                        hints[params[0]] if params else Any,
                        klass,
                    )
                    remember(writer_name)

    accessors: list[AccessorInfo] = []
    for name in order:
        reader = readers.get(name)
        writer = writers.get(name)
        declared = reader[1] if reader is not None else writer[1] if writer is not None else Any
        declaring = reader[3] if reader is not None else writer[2] if writer is not None else cls
        accessors.append(
            AccessorInfo(
                name=name,
                read=reader[0] if reader is not None else None,
                write=writer[0] if writer is not None else None,
                declared_type=unwrap_declared(declared),
                markers=(reader[2] if reader is not None else ()) + _markers(declared),
                declaring_class=declaring,
            )
        )
    return tuple(accessors)


def get_field_value(instance: Any, name: str) -> Any:
    """Read an attribute; an attribute that was never assigned reads as None."""
    return getattr(instance, name, None)


def _is_frozen(instance: Any) -> bool:
    params = getattr(type(instance), "__dataclass_params__", None)
    if params is not None and params.frozen:
        return True
    if isinstance(instance, pydantic.BaseModel):
        return bool(type(instance).model_config.get("frozen"))
    return False


def set_field_value(instance: Any, name: str, value: Any) -> None:
    """Write an attribute, bypassing frozen dataclass and pydantic guards.

    Raises:
        ReflectionAccessError: If the attribute cannot be written
    """
    try:
        if _is_frozen(instance):
            object.__setattr__(instance, name, value)
        else:
            setattr(instance, name, value)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ReflectionAccessError(
            f"Cannot set field {name!r} on {type(instance).__qualname__}: {exc}",
            owner=type(instance),
            member=name,
        ) from exc


def _apply_dataclass_defaults(instance: Any) -> None:
    for field in dataclasses.fields(instance):
        if field.default is not dataclasses.MISSING:
            object.__setattr__(instance, field.name, field.default)
        elif field.default_factory is not dataclasses.MISSING:
            object.__setattr__(instance, field.name, field.default_factory())


def _allocate(cls: type, tp: Any) -> Any:
    try:
        instance = cls.__new__(cls)
    except (TypeError, ValueError) as exc:
        raise ReflectionAccessError(f"Cannot construct instance of {type_name(tp)}: {exc}", owner=cls) from exc
    if dataclasses.is_dataclass(cls):
        _apply_dataclass_defaults(instance)
    if is_parameterized(tp):
        with contextlib.suppress(AttributeError, TypeError):
            object.__setattr__(instance, "__orig_class__", tp)
    return instance


def construct(tp: Any) -> Any:
    """Create an instance of a class or parameterized alias.

    Calls the zero-argument constructor; pydantic models are built with
    ``model_construct``; when the constructor demands arguments the instance
    is allocated without running ``__init__``. Constructing through a
    parameterized user generic keeps ``__orig_class__`` on the instance.

    Raises:
        ReflectionAccessError: If no instance can be produced
    """
    cls = raw_class(tp)
    if cls is None:
        raise ReflectionAccessError(f"Cannot construct instance of {type_name(tp)}")
    if issubclass(cls, pydantic.BaseModel):
        return cls.model_construct()
    target = unwrap_declared(tp) if is_parameterized(tp) and not isinstance(tp, type) else cls
    try:
        return target()
    except TypeError:
        return _allocate(cls, tp)
    except Exception as exc:
        raise ReflectionAccessError(f"Cannot construct instance of {type_name(tp)}: {exc}", owner=cls) from exc


def runtime_type_bindings(instance: Any) -> dict[str, Any]:
    """Type-parameter bindings the runtime kept for ``instance``.

    Reads ``__orig_class__`` (set when a user generic is instantiated through
    an alias such as ``Box[int]()``) and pydantic's generic metadata.
    """
    if instance is None:
        return {}
    orig_class = getattr(instance, "__orig_class__", None)
    if orig_class is not None:
        return bind_type_arguments(orig_class)
    metadata = getattr(type(instance), "__pydantic_generic_metadata__", None)
    if metadata and metadata.get("origin") is not None:
        origin_metadata = getattr(metadata["origin"], "__pydantic_generic_metadata__", {})
        parameters = origin_metadata.get("parameters", ())
        return {param.__name__: arg for param, arg in zip(parameters, metadata["args"], strict=False)}
    return {}


def _accepts(annotation: Any, source_class: type, *, exact: bool) -> bool:
    if isinstance(annotation, str):
        return annotation == source_class.__name__
    inner = strip_annotated(annotation)
    if get_origin(inner) in _UNION_ORIGINS:
        return any(_accepts(arg, source_class, exact=exact) for arg in typing.get_args(inner))
    cls = raw_class(inner)
    if cls is None:
        return False
    if exact:
        return cls is source_class or (cls is not object and issubclass(source_class, cls))
    return issubclass(source_class, cls)


def _returns_class(func: Callable[..., Any], hints: dict[str, Any], cls: type) -> bool:
    written = inspect.get_annotations(func).get("return")
    if isinstance(written, str) and written.strip("'\"") in (cls.__name__, "Self", "typing.Self"):
        return True
    returned = hints.get("return")
    return returned is typing.Self or raw_class(returned) is cls


@functools.lru_cache(maxsize=2048)
def converter_methods(cls: type, source_class: type) -> tuple[Callable[[Any], Any], ...]:
    """Static factories declared on ``cls`` that build it from one ``source_class`` value.

    A factory is a staticmethod or classmethod with exactly one required
    argument annotated to accept ``source_class`` and a return annotation of
    ``cls`` (or ``Self``). Only the class's own namespace is searched.
    """
    methods: list[Callable[[Any], Any]] = []
    for attr_name, member in vars(cls).items():
        if not isinstance(member, staticmethod | classmethod):
            continue
        func = member.__func__
        if _required_positional(func, bound=isinstance(member, classmethod)) != 1:
            continue
        hints = function_hints(func)
        if not _returns_class(func, hints, cls):
            continue
        params = list(inspect.signature(func).parameters)
        if isinstance(member, classmethod):
            params = params[1:]
        written = inspect.get_annotations(func).get(params[0])
        if isinstance(written, str) and written.strip("'\"") == source_class.__name__:
            methods.append(getattr(cls, attr_name))
            continue
        annotation = hints.get(params[0])
        if annotation is None or not _accepts(annotation, source_class, exact=False):
            continue
        methods.append(getattr(cls, attr_name))
    return tuple(methods)


def _signature(obj: Any) -> inspect.Signature | None:
    try:
        return inspect.signature(obj, eval_str=True)
    except (NameError, TypeError, ValueError, SyntaxError):
        try:
            return inspect.signature(obj)
        except (TypeError, ValueError):
            return None


@functools.lru_cache(maxsize=2048)
def constructor_accepts(cls: type, source_class: type) -> bool:
    """True when ``cls(value)`` is declared to take one ``source_class`` argument."""
    if issubclass(cls, pydantic.BaseModel):
        return False
    signature = _signature(cls)
    if signature is None:
        return False
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    parameters = list(signature.parameters.values())
    if any(p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty for p in parameters):
        return False
    candidates = [p for p in parameters if p.kind in positional]
    required = [p for p in candidates if p.default is inspect.Parameter.empty]
    if len(required) != 1 or candidates[0] is not required[0]:
        return False
    annotation = required[0].annotation
    if annotation is inspect.Parameter.empty:
        return False
    return _accepts(annotation, source_class, exact=True)
