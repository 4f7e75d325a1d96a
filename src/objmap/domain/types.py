"""Declared type-name conventions.

A declared type is a plain string:

- a composite type name registered in the catalog (``"Address"``)
- a scalar name (``int``, ``bool``, ``float``/``double``/``real``, ``string``,
  ``bytes``)
- ``array`` for an array of unspecified elements
- ``Element[]`` for an array of ``Element``

Scalar and ``array`` names are case-insensitive.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

ARRAY_SUFFIX = "[]"


class ScalarType(StrEnum):
    """Scalar type names recognised in declared types."""

    INT = "int"
    INTEGER = "integer"
    BOOL = "bool"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DOUBLE = "double"
    REAL = "real"
    STRING = "string"
    BYTES = "bytes"


SCALAR_NAMES: frozenset[str] = frozenset(member.value for member in ScalarType)
SCALAR_ARRAY = "array"

# Python values treated as scalars for passthrough.
SCALAR_VALUE_TYPES: tuple[type, ...] = (str, bytes, int, float, bool)
ARRAY_VALUE_TYPES: tuple[type, ...] = (list, tuple, dict)


def is_scalar_type(type_name: str) -> bool:
    """Whether *type_name* names a scalar type."""
    return type_name.strip().lower() in SCALAR_NAMES


def is_scalar_array_type(type_name: str) -> bool:
    """Whether *type_name* is the untyped ``array`` name."""
    return type_name.strip().lower() == SCALAR_ARRAY


def element_type(type_name: str) -> str | None:
    """Return ``Element`` for ``"Element[]"``, or None if not an array type.

    Examples:
        >>> element_type("Address[]")
        'Address'
        >>> element_type("Address") is None
        True
    """
    stripped = type_name.strip()
    if stripped.endswith(ARRAY_SUFFIX):
        return stripped[: -len(ARRAY_SUFFIX)]
    return None


def is_scalar(value: Any) -> bool:
    """Whether *value* is a scalar runtime value. None is not a scalar."""
    return isinstance(value, SCALAR_VALUE_TYPES)


def is_array(value: Any) -> bool:
    """Whether *value* is an array (list, tuple, or dict)."""
    return isinstance(value, ARRAY_VALUE_TYPES)
