"""Capability contracts for pluggable conversion and resolution.

The engine only ever calls ``convert(value)`` and ``resolve(source)``.
Failure behaviour belongs to each implementation; the engine never catches
what these raise.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TypeConverter(Protocol):
    """Transforms a single raw source value."""

    def convert(self, value: Any) -> Any: ...


@runtime_checkable
class ValueResolver(Protocol):
    """Computes a destination value from the whole source object."""

    def resolve(self, source: Any) -> Any: ...


@dataclass(frozen=True)
class CallableConverter:
    """Adapts a plain ``f(value)`` callable to :class:`TypeConverter`."""

    func: Callable[[Any], Any]

    def convert(self, value: Any) -> Any:
        return self.func(value)


@dataclass(frozen=True)
class CallableResolver:
    """Adapts a plain ``f(source)`` callable to :class:`ValueResolver`."""

    func: Callable[[Any], Any]

    def resolve(self, source: Any) -> Any:
        return self.func(source)


def as_converter(obj: TypeConverter | Callable[[Any], Any]) -> TypeConverter:
    """Return *obj* as a TypeConverter, wrapping bare callables.

    Raises:
        TypeError: If *obj* is neither a converter nor callable.
    """
    if isinstance(obj, TypeConverter):
        return obj
    if callable(obj):
        return CallableConverter(obj)
    msg = f"Expected a TypeConverter or callable, got {type(obj).__name__}"
    raise TypeError(msg)


def as_resolver(obj: ValueResolver | Callable[[Any], Any]) -> ValueResolver:
    """Return *obj* as a ValueResolver, wrapping bare callables.

    Raises:
        TypeError: If *obj* is neither a resolver nor callable.
    """
    if isinstance(obj, ValueResolver):
        return obj
    if callable(obj):
        return CallableResolver(obj)
    msg = f"Expected a ValueResolver or callable, got {type(obj).__name__}"
    raise TypeError(msg)
