"""TOML mapping profiles: declared types plus rules in one file.

Profile format::

    [types.Customer]
    name = "string"
    address = "Address"
    orders = "Order[]"

    [types.Address]
    street = "string"

    [[rules]]
    for = "CustomerView::display_name"
    from = "Customer::name"

    [[rules]]
    for = "CustomerView::tags"
    from = "Customer::tags"
    converter = "join"
    converter_args = { delimiter = ", " }

    [[rules]]
    for = "CustomerView::order_count"
    resolver = "order_count"

Converter and resolver names come from the plugin tables
(:meth:`PluginManager.converters` / :meth:`PluginManager.resolvers`).
"""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from objmap.domain.capabilities import as_converter, as_resolver
from objmap.domain.catalog import TypeCatalog
from objmap.domain.errors import MalformedReferenceError, ProfileError
from objmap.domain.references import PropertyReference
from objmap.domain.rules import MappingRule, RuleRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

    from objmap.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

_RULE_KEYS = frozenset({"for", "from", "converter", "converter_args", "resolver", "resolver_args"})


@dataclass(frozen=True)
class LoadedProfile:
    """A parsed profile: its declared types and its rules."""

    path: Path | None
    catalog: TypeCatalog
    registry: RuleRegistry

    @property
    def type_names(self) -> list[str]:
        return [descriptor.name for descriptor in self.catalog]


def load_profile(path: Path, plugins: PluginManager | None = None) -> LoadedProfile:
    """Read and build the profile at *path*.

    Raises:
        ProfileError: If the file is missing, is not valid TOML, or
            declares invalid types or rules.
    """
    if not path.is_file():
        msg = f"Profile not found: {path}"
        raise ProfileError(msg)
    raw = path.read_text(encoding="utf-8")
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ProfileError(msg) from exc
    loaded = build_profile(data, plugins)
    logger.debug(
        "Loaded profile %s: %d types, %d rules", path, len(loaded.catalog), len(loaded.registry)
    )
    return dataclasses.replace(loaded, path=path)


def build_profile(data: dict[str, Any], plugins: PluginManager | None = None) -> LoadedProfile:
    """Build a profile from already-parsed TOML data."""
    unknown = set(data) - {"types", "rules"}
    if unknown:
        msg = f"Unknown profile sections: {', '.join(sorted(unknown))}"
        raise ProfileError(msg)

    catalog = TypeCatalog()
    types_table = data.get("types", {})
    if not isinstance(types_table, dict):
        raise ProfileError("[types] must be a table")
    for type_name, properties in types_table.items():
        if not isinstance(properties, dict):
            msg = f"[types.{type_name}] must be a table of property = type"
            raise ProfileError(msg)
        bad = [name for name, declared in properties.items() if not isinstance(declared, str)]
        if bad:
            msg = f"[types.{type_name}] declared types must be strings: {', '.join(bad)}"
            raise ProfileError(msg)
        try:
            catalog.define(type_name, properties)
        except ValueError as exc:
            raise ProfileError(str(exc)) from exc

    converters = plugins.converters() if plugins is not None else {}
    resolvers = plugins.resolvers() if plugins is not None else {}

    registry = RuleRegistry()
    rules = data.get("rules", [])
    if not isinstance(rules, list):
        raise ProfileError("rules must be an array of tables ([[rules]])")
    for index, entry in enumerate(rules):
        registry.register(_build_rule(index, entry, converters, resolvers))

    return LoadedProfile(path=None, catalog=catalog, registry=registry)


def _build_rule(
    index: int,
    entry: Any,
    converters: dict[str, Callable[..., Any]],
    resolvers: dict[str, Callable[..., Any]],
) -> MappingRule:
    where = f"rules[{index}]"
    if not isinstance(entry, dict):
        msg = f"{where} must be a table"
        raise ProfileError(msg)
    unknown = set(entry) - _RULE_KEYS
    if unknown:
        msg = f"{where} has unknown keys: {', '.join(sorted(unknown))}"
        raise ProfileError(msg)
    if "for" not in entry:
        msg = f"{where} is missing 'for'"
        raise ProfileError(msg)
    if "from" not in entry and "resolver" not in entry:
        msg = f"{where} needs 'from' or 'resolver'"
        raise ProfileError(msg)
    if "converter" in entry and "from" not in entry:
        msg = f"{where} has a converter but no 'from'"
        raise ProfileError(msg)

    try:
        for_member = PropertyReference.parse(entry["for"])
        from_member = PropertyReference.parse(entry["from"]) if "from" in entry else None
    except MalformedReferenceError as exc:
        msg = f"{where}: {exc}"
        raise ProfileError(msg) from exc

    converter = None
    if "converter" in entry:
        factory = _lookup(where, "converter", entry["converter"], converters)
        converter = as_converter(_instantiate(where, factory, entry.get("converter_args", {})))
    resolver = None
    if "resolver" in entry:
        factory = _lookup(where, "resolver", entry["resolver"], resolvers)
        resolver = as_resolver(_instantiate(where, factory, entry.get("resolver_args", {})))

    return MappingRule(
        for_member=for_member,
        from_member=from_member,
        type_converter=converter,
        value_resolver=resolver,
    )


def _lookup(
    where: str, kind: str, name: Any, table: dict[str, Callable[..., Any]]
) -> Callable[..., Any]:
    factory = table.get(name) if isinstance(name, str) else None
    if factory is None:
        available = ", ".join(sorted(table)) or "none"
        msg = f"{where}: unknown {kind} {name!r} (available: {available})"
        raise ProfileError(msg)
    return factory


def _instantiate(where: str, factory: Callable[..., Any], args: Any) -> Any:
    if not isinstance(args, dict):
        msg = f"{where}: arguments must be a table"
        raise ProfileError(msg)
    try:
        return factory(**args)
    except TypeError as exc:
        msg = f"{where}: {exc}"
        raise ProfileError(msg) from exc
