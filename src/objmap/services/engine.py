"""Mapping engine: recursive, type-directed object graph copy.

``Mapper.map(destination, source)`` dispatches on the shape of
*destination*, in this order:

1. *source* is None -> None, whatever the destination.
2. *destination* is a live object:
   a. a :class:`PropertyDescriptor` -> map the raw value into that property;
   b. anything else -> object-to-object mapping.
3. *destination* is an array (list, tuple, dict) -> scalar-array copy.
4. *destination* is a class, or a type name known to the catalog ->
   instantiate it, then object-to-object mapping. The builtin scalar and
   array classes are not instantiated: ``list``, ``tuple`` and ``dict``
   take the scalar-array branch, ``str``, ``bytes`` and the numbers fall
   through to step 5.
5. otherwise -> *source* if it is a scalar, else None.

Object-to-object mapping consults the rule registry for every destination
property (under any name of the destination type), then falls back to the
same-named source property. Nested values are mapped according to the
property's declared type.

INVARIANT: resolution gaps never raise. They leave the destination property
untouched (or yield None) and are recorded on the per-call run, which
``map_with_report`` exposes and strict mode turns into an error.
Converter and resolver exceptions propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from typing import Any

from objmap.config.models import MapperConfig
from objmap.domain.catalog import PropertyDescriptor, TypeCatalog
from objmap.domain.errors import (
    CyclicGraphError,
    IncompleteMappingError,
    MaxDepthExceededError,
)
from objmap.domain.references import PropertyReference
from objmap.domain.rules import MappingRule, RuleRegistry
from objmap.domain.types import (
    ARRAY_VALUE_TYPES,
    SCALAR_VALUE_TYPES,
    element_type,
    is_array,
    is_scalar,
    is_scalar_array_type,
    is_scalar_type,
)
from objmap.services.result import GapKind, MappingGap, MappingResult

logger = logging.getLogger(__name__)


class _MappingRun:
    """State owned by a single top-level ``map`` call."""

    def __init__(self, config: MapperConfig) -> None:
        self._config = config
        self._active: set[int] = set()
        self._depth = 0
        self.gaps: list[MappingGap] = []

    def gap(self, kind: GapKind, path: str, detail: str = "") -> None:
        logger.debug("Mapping gap at %s: %s %s", path, kind.value, detail)
        self.gaps.append(MappingGap(kind=kind, path=path, detail=detail))

    @contextmanager
    def entering(self, source: Any, path: str, type_name: str) -> Generator[None]:
        """Track *source* on the recursion path while its properties are mapped."""
        key = id(source)
        if self._config.detect_cycles and key in self._active:
            logger.debug("Cycle detected at %s", path)
            raise CyclicGraphError(path, type_name)
        max_depth = self._config.max_depth
        if max_depth is not None and self._depth >= max_depth:
            raise MaxDepthExceededError(path, max_depth)
        self._active.add(key)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            self._active.discard(key)


class Mapper:
    """Maps source values into destination shapes.

    Usage::

        registry = RuleRegistry()
        registry.register_direct("CustomerView::full_name", "Customer::name")
        catalog = TypeCatalog()
        catalog.register(CustomerView, {"full_name": "string"})

        mapper = Mapper(registry, catalog)
        view = mapper.map(CustomerView, customer)

    The registry and catalog are frozen on construction; one Mapper can be
    shared across threads.
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        catalog: TypeCatalog | None = None,
        *,
        config: MapperConfig | None = None,
    ) -> None:
        self._registry = registry if registry is not None else RuleRegistry()
        self._catalog = catalog if catalog is not None else TypeCatalog()
        self._config = config or MapperConfig()
        self._registry.freeze()
        self._catalog.freeze()

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    @property
    def catalog(self) -> TypeCatalog:
        return self._catalog

    @property
    def config(self) -> MapperConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def map(self, destination: Any, source: Any) -> Any:
        """Map *source* into *destination* and return the result.

        Raises:
            IncompleteMappingError: In strict mode, if any gap was recorded.
            CyclicGraphError: If the source graph loops back on itself.
            MaxDepthExceededError: If nesting exceeds ``max_depth``.
        """
        result = self.map_with_report(destination, source)
        if self._config.strict and result.gaps:
            raise IncompleteMappingError(result.gaps, result.value)
        return result.value

    def map_with_report(self, destination: Any, source: Any) -> MappingResult:
        """Like :meth:`map`, but return the value together with its gaps.

        Never raises for gaps, even in strict mode.
        """
        run = _MappingRun(self._config)
        value = self._map(run, destination, source, self._root_path(destination))
        return MappingResult(value=value, gaps=run.gaps)

    def map_object_array(self, element: str | type, sources: Any) -> list[Any]:
        """Map every element of *sources* into a fresh instance of *element*.

        *element* is a catalog type name or a class; unregistered classes
        are described from their annotations, as in :meth:`map`.

        Raises:
            UnknownTypeError: If *element* is a name the catalog does not know.
        """
        run = _MappingRun(self._config)
        if isinstance(element, str):
            type_name = element
            factory = self._catalog.get(element).instantiate
        else:
            type_name = self._catalog.type_name_of(element)
            factory = self._catalog.describe(element).instantiate
        values = self._map_object_array(run, factory, sources, f"{type_name}[]")
        if self._config.strict and run.gaps:
            raise IncompleteMappingError(run.gaps, values)
        return values

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _map(self, run: _MappingRun, destination: Any, source: Any, path: str) -> Any:
        if source is None:
            return None

        if _is_live_instance(destination):
            if isinstance(destination, PropertyDescriptor):
                return self._map_property(run, destination, source, path)
            return self._map_object(run, destination, source, path)

        if is_array(destination):
            return self._map_scalar_array(run, destination, source, path)

        if isinstance(destination, type):
            if issubclass(destination, ARRAY_VALUE_TYPES):
                container = {} if issubclass(destination, dict) else []
                return self._map_scalar_array(run, container, source, path)
            if not issubclass(destination, SCALAR_VALUE_TYPES):
                instance = self._catalog.describe(destination).instantiate()
                return self._map_object(run, instance, source, path)

        if isinstance(destination, str) and self._catalog.is_known(destination):
            return self._map_object(run, self._catalog.instantiate(destination), source, path)

        # Unresolvable destination: only scalars pass through.
        if is_scalar(source):
            return source
        run.gap(GapKind.NOT_A_SCALAR, path, type(source).__name__)
        return None

    # ------------------------------------------------------------------
    # Object-to-object
    # ------------------------------------------------------------------

    def _map_object(self, run: _MappingRun, destination: Any, source: Any, path: str) -> Any:
        if source is None:
            return None
        if not _is_object(source):
            run.gap(GapKind.NOT_AN_OBJECT, path, type(source).__name__)
            return None

        if type(destination) is type(source):
            return source

        descriptor = self._catalog.describe(destination)
        source_names = self._catalog.type_names_of(source)
        readable = self._catalog.readable_properties(source)
        aliases = sorted(self._catalog.type_names_of(destination) - {descriptor.name})

        with run.entering(source, path, self._catalog.type_name_of(source)):
            for prop in descriptor.properties:
                prop_path = f"{path}.{prop.name}"
                rule = self._lookup_rule(prop, aliases)
                if rule is not None:
                    self._apply_rule(
                        run, rule, destination, prop, source, source_names, readable, prop_path
                    )
                    continue

                accessor = readable.get(prop.name)
                if accessor is None:
                    run.gap(GapKind.MISSING_SOURCE_PROPERTY, prop_path, prop.name)
                    continue
                prop.set(destination, self._map_property(run, prop, accessor.get(source), prop_path))

        return destination

    def _lookup_rule(self, prop: PropertyDescriptor, aliases: list[str]) -> MappingRule | None:
        """Rule for *prop* keyed on its catalog owner, else on another name of the type."""
        rule = self._registry.lookup(prop.reference)
        if rule is not None:
            return rule
        for owner in aliases:
            rule = self._registry.lookup(PropertyReference(owner, prop.name))
            if rule is not None:
                return rule
        return None

    def _apply_rule(
        self,
        run: _MappingRun,
        rule: MappingRule,
        destination: Any,
        prop: PropertyDescriptor,
        source: Any,
        source_names: frozenset[str],
        readable: dict[str, PropertyDescriptor],
        path: str,
    ) -> None:
        if rule.from_member is not None and rule.accepts_source(source_names):
            member = rule.from_member.name
            accessor = readable.get(member)
            if accessor is None:
                run.gap(GapKind.MISSING_SOURCE_PROPERTY, path, str(rule.from_member))
                return
            raw = accessor.get(source)
            if rule.type_converter is not None:
                prop.set(destination, rule.type_converter.convert(raw))
            else:
                prop.set(destination, self._map_property(run, prop, raw, path))
            return

        if rule.value_resolver is not None:
            prop.set(destination, rule.value_resolver.resolve(source))
            return

        if rule.from_member is not None:
            run.gap(
                GapKind.SOURCE_TYPE_MISMATCH,
                path,
                f"rule expects {rule.from_member.owner}, got {self._catalog.type_name_of(source)}",
            )
        else:
            run.gap(GapKind.EMPTY_RULE, path, str(rule.for_member))

    # ------------------------------------------------------------------
    # Single property
    # ------------------------------------------------------------------

    def _map_property(
        self, run: _MappingRun, prop: PropertyDescriptor, value: Any, path: str
    ) -> Any:
        type_name = self._catalog.declared_type(prop)
        if not type_name:
            run.gap(GapKind.UNRESOLVED_TYPE, path, "no declared type")
            return None

        if self._catalog.is_known(type_name):
            return self._map_object(run, self._catalog.instantiate(type_name), value, path)

        if is_scalar_array_type(type_name):
            return self._map_scalar_array(run, [], value, path)

        if is_scalar_type(type_name):
            return self._map(run, 0, value, path)

        element = element_type(type_name)
        if element is not None:
            if self._catalog.is_known(element):
                return self._map_object_array(
                    run, self._catalog.get(element).instantiate, value, path
                )
            if is_scalar_type(element):
                return self._map_scalar_array(run, [], value, path)

        run.gap(GapKind.UNRESOLVED_TYPE, path, type_name)
        return None

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def _map_scalar_array(
        self, run: _MappingRun, destination: Any, source: Any, path: str
    ) -> list[Any] | dict[Any, Any]:
        if not is_array(source):
            if source is not None:
                run.gap(GapKind.NOT_AN_ARRAY, path, type(source).__name__)
            return {} if isinstance(destination, dict) else []
        if isinstance(source, dict):
            return dict(source)
        return list(source)

    def _map_object_array(
        self, run: _MappingRun, factory: Callable[[], Any], source: Any, path: str
    ) -> list[Any]:
        if not is_array(source):
            if source is not None:
                run.gap(GapKind.NOT_AN_ARRAY, path, type(source).__name__)
            return []
        items: Iterable[Any] = source.values() if isinstance(source, dict) else source
        return [
            self._map(run, factory(), item, f"{path}[{index}]")
            for index, item in enumerate(items)
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _root_path(self, destination: Any) -> str:
        if isinstance(destination, PropertyDescriptor):
            return str(destination.reference)
        if isinstance(destination, str):
            return destination or "<scalar>"
        if is_array(destination):
            return "[]"
        if _is_live_instance(destination) or isinstance(destination, type):
            return self._catalog.type_name_of(destination)
        return "<scalar>"


def _is_live_instance(value: Any) -> bool:
    """An instantiated object: not None, a class, a scalar, or an array."""
    return not (
        value is None or isinstance(value, type) or is_scalar(value) or is_array(value)
    )


def _is_object(value: Any) -> bool:
    return _is_live_instance(value)
