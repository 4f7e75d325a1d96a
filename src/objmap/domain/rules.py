"""Mapping rules and the rule registry.

A rule binds one destination property to exactly one data source: a source
property (optionally passed through a converter) or a value resolver. When
both are set, the source property wins.

The registry is filled during configuration and read during mapping.
Registering a rule for an already-registered destination property replaces
it (last write wins). Source properties are not validated here; the engine
checks them lazily while mapping.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from objmap.domain.capabilities import (
    TypeConverter,
    ValueResolver,
    as_converter,
    as_resolver,
)
from objmap.domain.errors import MalformedReferenceError, RegistryFrozenError
from objmap.domain.references import PropertyReference

logger = logging.getLogger(__name__)

RefLike = PropertyReference | str


@dataclass(frozen=True)
class MappingRule:
    """An explicit instruction for producing one destination property."""

    for_member: PropertyReference
    from_member: PropertyReference | None = None
    type_converter: TypeConverter | None = None
    value_resolver: ValueResolver | None = None

    @property
    def uses_source_member(self) -> bool:
        return self.from_member is not None

    @property
    def uses_resolver(self) -> bool:
        """True only when the resolver is the active data source."""
        return self.from_member is None and self.value_resolver is not None

    def accepts_source(self, source_type_names: frozenset[str]) -> bool:
        """Whether the ``from_member`` owner matches the source being mapped.

        A wildcard owner (``*``) matches any source.
        """
        if self.from_member is None:
            return False
        if self.from_member.is_wildcard:
            return True
        return self.from_member.owner in source_type_names

    def describe(self) -> str:
        """One-line human summary, used by ``objmap check``."""
        if self.from_member is not None:
            via = ""
            if self.type_converter is not None:
                via = f" via {type(self.type_converter).__name__}"
            return f"{self.for_member} <- {self.from_member}{via}"
        if self.value_resolver is not None:
            return f"{self.for_member} <- resolve({type(self.value_resolver).__name__})"
        return f"{self.for_member} <- (nothing)"


class RuleRegistry:
    """Destination :class:`PropertyReference` -> :class:`MappingRule`.

    Mutable until :meth:`freeze` is called. A :class:`~objmap.Mapper`
    freezes the registry it is given, so every registration must happen
    before mapping starts.
    """

    def __init__(self) -> None:
        self._rules: dict[PropertyReference, MappingRule] = {}
        self._frozen = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, rule: MappingRule) -> MappingRule:
        """Store a pre-built rule, replacing any rule for the same property."""
        if self._frozen:
            msg = f"Cannot register {rule.for_member}: registry is frozen"
            raise RegistryFrozenError(msg)
        if rule.for_member in self._rules:
            logger.debug("Replacing mapping rule for %s", rule.for_member)
        self._rules[rule.for_member] = rule
        return rule

    def register_direct(self, for_member: RefLike, from_member: RefLike) -> MappingRule:
        """Map *for_member* straight from *from_member*."""
        return self.register(
            MappingRule(
                for_member=PropertyReference.coerce(for_member),
                from_member=PropertyReference.coerce(from_member),
            )
        )

    def register_with_converter(
        self,
        for_member: RefLike,
        from_member: RefLike,
        converter: TypeConverter | Callable[[Any], Any],
    ) -> MappingRule:
        """Map *for_member* from *from_member*, passing the value through *converter*."""
        return self.register(
            MappingRule(
                for_member=PropertyReference.coerce(for_member),
                from_member=PropertyReference.coerce(from_member),
                type_converter=as_converter(converter),
            )
        )

    def register_with_resolver(
        self,
        for_member: RefLike,
        resolver: ValueResolver | Callable[[Any], Any],
    ) -> MappingRule:
        """Compute *for_member* from the whole source object via *resolver*."""
        return self.register(
            MappingRule(
                for_member=PropertyReference.coerce(for_member),
                value_resolver=as_resolver(resolver),
            )
        )

    def freeze(self) -> None:
        """Make the registry read-only. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, destination: RefLike) -> MappingRule | None:
        """Exact-match lookup; no inheritance or wildcard matching."""
        return self._rules.get(PropertyReference.coerce(destination))

    def rules_for(self, owner: str) -> list[MappingRule]:
        """All rules whose destination property belongs to *owner*."""
        return [rule for ref, rule in self._rules.items() if ref.owner == owner]

    def __contains__(self, destination: object) -> bool:
        if not isinstance(destination, (PropertyReference, str)):
            return False
        try:
            return self.lookup(destination) is not None
        except MalformedReferenceError:
            return False

    def __iter__(self) -> Iterator[MappingRule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)
