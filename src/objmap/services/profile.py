"""Fluent configuration surface over :class:`RuleRegistry`.

::

    profile = MappingProfile()
    profile.for_member("OrderView::customer").from_member("Order::buyer")
    profile.for_member("OrderView::line_count").from_member("Order::lines").using(CountConverter())
    profile.for_member("OrderView::total").resolve_using(lambda order: order.net + order.tax)
    mapper = profile.build_mapper(catalog)

Each terminal call writes exactly one rule; a later call for the same
destination property replaces it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from objmap.domain.references import PropertyReference
from objmap.domain.rules import MappingRule, RuleRegistry

if TYPE_CHECKING:
    from objmap.config.models import MapperConfig
    from objmap.domain.capabilities import TypeConverter, ValueResolver
    from objmap.domain.catalog import TypeCatalog
    from objmap.services.engine import Mapper


class MemberExpression:
    """Pending rule for one destination property."""

    def __init__(self, registry: RuleRegistry, for_member: PropertyReference) -> None:
        self._registry = registry
        self._for_member = for_member

    def from_member(self, source: PropertyReference | str) -> SourceExpression:
        """Take the value from *source* (``"Type::property"``)."""
        rule = self._registry.register_direct(self._for_member, source)
        return SourceExpression(self._registry, rule)

    def resolve_using(self, resolver: ValueResolver | Callable[[Any], Any]) -> MappingRule:
        """Compute the value from the whole source object."""
        return self._registry.register_with_resolver(self._for_member, resolver)


class SourceExpression:
    """A direct rule that may still be given a converter."""

    def __init__(self, registry: RuleRegistry, rule: MappingRule) -> None:
        self._registry = registry
        self.rule = rule

    def using(self, converter: TypeConverter | Callable[[Any], Any]) -> MappingRule:
        """Pass the source value through *converter* before assignment."""
        assert self.rule.from_member is not None
        self.rule = self._registry.register_with_converter(
            self.rule.for_member, self.rule.from_member, converter
        )
        return self.rule


class MappingProfile:
    """Collects mapping rules, then builds a :class:`Mapper` from them."""

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry if registry is not None else RuleRegistry()

    def for_member(self, destination: PropertyReference | str) -> MemberExpression:
        return MemberExpression(self.registry, PropertyReference.coerce(destination))

    def create_map(self, for_member: str, from_member: str) -> MappingRule:
        return self.registry.register_direct(for_member, from_member)

    def create_map_using_converter(
        self,
        for_member: str,
        from_member: str,
        converter: TypeConverter | Callable[[Any], Any],
    ) -> MappingRule:
        return self.registry.register_with_converter(for_member, from_member, converter)

    def create_map_using_resolver(
        self,
        for_member: str,
        resolver: ValueResolver | Callable[[Any], Any],
    ) -> MappingRule:
        return self.registry.register_with_resolver(for_member, resolver)

    def build_mapper(
        self,
        catalog: TypeCatalog | None = None,
        *,
        config: MapperConfig | None = None,
    ) -> Mapper:
        """Freeze the collected rules into a ready-to-use Mapper."""
        from objmap.services.engine import Mapper

        return Mapper(self.registry, catalog, config=config)
