"""Dynamic record classes for types declared outside Python code.

Profiles declare types as plain property tables. Each declared type becomes a
:class:`Record` subclass whose properties all default to None.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, ClassVar


class Record:
    """Base for dynamically declared types."""

    _record_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, **values: Any) -> None:
        for name in self._record_fields:
            setattr(self, name, values.pop(name, None))
        if values:
            unexpected = ", ".join(sorted(values))
            msg = f"{type(self).__name__} got unexpected properties: {unexpected}"
            raise TypeError(msg)

    def as_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self._record_fields}

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.as_dict() == other.as_dict()  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"{type(self).__name__}({inner})"


def make_record_class(name: str, fields: Iterable[str]) -> type[Record]:
    """Create a :class:`Record` subclass named *name* with *fields*."""
    if not name.isidentifier():
        msg = f"Record type name must be an identifier: {name!r}"
        raise ValueError(msg)
    field_names = tuple(fields)
    for field_name in field_names:
        if not field_name.isidentifier() or field_name.startswith("_"):
            msg = f"Invalid property name {field_name!r} on {name}"
            raise ValueError(msg)
    return type(name, (Record,), {"_record_fields": field_names, "__module__": __name__})
