"""JSON documents <-> catalog instances.

``hydrate`` turns parsed JSON into instances of catalog types so the
engine has real objects to read from; ``dehydrate`` turns mapped results
back into JSON-compatible data.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

from objmap.domain.catalog import TypeCatalog
from objmap.domain.errors import DocumentError
from objmap.domain.records import Record
from objmap.domain.types import element_type


def hydrate(catalog: TypeCatalog, type_name: str, data: Any) -> Any:
    """Build an instance of *type_name* from a JSON object.

    Keys without a declared property are ignored. Values of composite or
    composite-array properties are hydrated recursively; everything else is
    assigned as parsed.

    Raises:
        UnknownTypeError: If *type_name* is not in the catalog.
        DocumentError: If *data* is not a JSON object.
    """
    descriptor = catalog.get(type_name)
    if data is None:
        return None
    if not isinstance(data, dict):
        msg = f"Expected a JSON object for {type_name}, got {type(data).__name__}"
        raise DocumentError(msg)
    instance = descriptor.instantiate()
    for prop in descriptor.properties:
        if prop.name in data:
            prop.set(instance, _hydrate_value(catalog, prop.declared_type, data[prop.name]))
    return instance


def _hydrate_value(catalog: TypeCatalog, declared: str | None, value: Any) -> Any:
    if declared is None or value is None:
        return value
    if catalog.is_known(declared) and isinstance(value, dict):
        return hydrate(catalog, declared, value)
    element = element_type(declared)
    if element is not None and catalog.is_known(element) and isinstance(value, list):
        return [hydrate(catalog, element, item) for item in value]
    return value


def dehydrate(value: Any) -> Any:
    """Convert mapped objects into JSON-compatible data."""
    if isinstance(value, Record):
        return {key: dehydrate(item) for key, item in value.as_dict().items()}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: dehydrate(getattr(value, f.name)) for f in dataclasses.fields(value)}
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump):
        return model_dump(mode="json")
    if isinstance(value, dict):
        return {str(key): dehydrate(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [dehydrate(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if hasattr(value, "__dict__"):
        return {k: dehydrate(v) for k, v in vars(value).items() if not k.startswith("_")}
    return str(value)


def read_document(path: Path) -> Any:
    """Parse the JSON document at *path*.

    Raises:
        DocumentError: If the file is missing or not valid JSON.
    """
    if not path.is_file():
        msg = f"Document not found: {path}"
        raise DocumentError(msg)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise DocumentError(msg) from exc
