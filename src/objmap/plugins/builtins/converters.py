"""Built-in converters: collection count and delimiter join."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sized
from typing import Any

from objmap.plugins.hookspecs import hookimpl


class CountConverter:
    """Number of elements in a collection."""

    def convert(self, value: Sized) -> int:
        return len(value)


class JoinConverter:
    """Join the elements of a collection as strings.

    Args:
        delimiter: Placed between every element. Defaults to no separator.
    """

    def __init__(self, delimiter: str = "") -> None:
        self.delimiter = delimiter

    def convert(self, value: Iterable[Any]) -> str:
        if isinstance(value, dict):
            value = value.values()
        return self.delimiter.join(str(item) for item in value)


class BuiltinConvertersPlugin:
    """Registers ``count`` and ``join``."""

    @hookimpl
    def register_converters(self) -> dict[str, Callable[..., Any]]:
        return {"count": CountConverter, "join": JoinConverter}
