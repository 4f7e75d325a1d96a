"""MappingService: profile-driven mapping for the CLI.

INVARIANT: every public method returns ServiceResult. Expected failures
(bad profile, bad document, strict-mode gaps, cyclic graphs) become
``ok=False`` results; converter and resolver exceptions are not caught.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from objmap.config.models import MapperConfig
from objmap.domain.errors import (
    CyclicGraphError,
    DocumentError,
    IncompleteMappingError,
    MaxDepthExceededError,
    ProfileError,
    UnknownTypeError,
)
from objmap.domain.types import element_type, is_scalar_array_type, is_scalar_type
from objmap.infrastructure.documents import dehydrate, hydrate, read_document
from objmap.infrastructure.profiles import LoadedProfile, load_profile
from objmap.services.engine import Mapper
from objmap.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from objmap.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class MappingService:
    """Loads profiles and documents, runs the engine, and reports."""

    def __init__(self, plugins: PluginManager, config: MapperConfig | None = None) -> None:
        self._plugins = plugins
        self._config = config or MapperConfig()

    # ------------------------------------------------------------------
    # map
    # ------------------------------------------------------------------

    def map_document(
        self,
        profile_path: Path,
        source_path: Path,
        *,
        into: str,
        source_type: str,
        strict: bool | None = None,
    ) -> ServiceResult:
        """Map the JSON document at *source_path* from *source_type* into *into*."""
        op = "map"
        try:
            profile = load_profile(profile_path, self._plugins)
            document = read_document(source_path)
            source = hydrate(profile.catalog, source_type, document)
        except (ProfileError, DocumentError) as exc:
            return _failure(op, "INVALID_INPUT", str(exc))
        except UnknownTypeError as exc:
            return _failure(op, "UNKNOWN_TYPE", str(exc), type_name=exc.type_name)

        if not profile.catalog.is_known(into):
            return _failure(op, "UNKNOWN_TYPE", f"Unknown type: {into!r}", type_name=into)

        config = self._config
        if strict is not None:
            config = config.model_copy(update={"strict": strict})
        mapper = Mapper(profile.registry, profile.catalog, config=config)

        try:
            report = mapper.map_with_report(into, source)
        except (CyclicGraphError, MaxDepthExceededError) as exc:
            return _failure(op, "GRAPH_SHAPE", str(exc), path=exc.path)

        warnings = [str(gap) for gap in report.gaps]
        if config.strict and report.gaps:
            exc = IncompleteMappingError(report.gaps, report.value)
            return ServiceResult(
                ok=False,
                op=op,
                warnings=warnings,
                error=ServiceError(
                    code="INCOMPLETE",
                    message=str(exc),
                    detail={"gaps": [gap.model_dump(mode="json") for gap in report.gaps]},
                ),
            )

        logger.debug("Mapped %s -> %s with %d gaps", source_type, into, len(report.gaps))
        return ServiceResult(
            ok=True,
            op=op,
            data={"type": into, "result": dehydrate(report.value)},
            warnings=warnings,
            meta={"gap_count": len(report.gaps)},
        )

    # ------------------------------------------------------------------
    # check
    # ------------------------------------------------------------------

    def check_profile(self, profile_path: Path) -> ServiceResult:
        """Validate a profile: unknown types, undeclared properties."""
        op = "check"
        try:
            profile = load_profile(profile_path, self._plugins)
        except ProfileError as exc:
            return _failure(op, "INVALID_PROFILE", str(exc))

        issues = _type_issues(profile) + _rule_issues(profile)
        types = [
            {
                "name": descriptor.name,
                "properties": {p.name: p.declared_type for p in descriptor.properties},
            }
            for descriptor in profile.catalog
        ]
        rules = [_rule_row(rule) for rule in profile.registry]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "profile": str(profile_path),
                "types": types,
                "rules": rules,
                "issues": issues,
                "healthy": not issues,
            },
            warnings=issues,
        )

    # ------------------------------------------------------------------
    # converters
    # ------------------------------------------------------------------

    def list_capabilities(self) -> ServiceResult:
        """Converter and resolver names available to profiles."""
        return ServiceResult(
            ok=True,
            op="converters",
            data={
                "converters": sorted(self._plugins.converters()),
                "resolvers": sorted(self._plugins.resolvers()),
                "plugins": self._plugins.list_plugin_names(),
            },
        )


def _failure(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))


def _rule_row(rule: Any) -> dict[str, Any]:
    return {
        "for": str(rule.for_member),
        "from": str(rule.from_member) if rule.from_member else None,
        "converter": type(rule.type_converter).__name__ if rule.type_converter else None,
        "resolver": type(rule.value_resolver).__name__ if rule.value_resolver else None,
    }


def _type_issues(profile: LoadedProfile) -> list[str]:
    issues: list[str] = []
    catalog = profile.catalog
    for descriptor in catalog:
        for prop in descriptor.properties:
            declared = prop.declared_type or ""
            element = element_type(declared)
            target = element if element is not None else declared
            if is_scalar_type(target) or is_scalar_array_type(declared) or catalog.is_known(target):
                continue
            issues.append(f"{prop.reference}: unknown declared type {declared!r}")
    return issues


def _rule_issues(profile: LoadedProfile) -> list[str]:
    issues: list[str] = []
    catalog = profile.catalog
    for rule in profile.registry:
        target = catalog.find(rule.for_member.owner)
        if target is None:
            issues.append(f"{rule.for_member}: destination type is not declared")
        elif target.get_property(rule.for_member.name) is None:
            issues.append(f"{rule.for_member}: destination property is not declared")

        source_ref = rule.from_member
        if source_ref is None or source_ref.is_wildcard:
            continue
        source = catalog.find(source_ref.owner)
        if source is None:
            issues.append(f"{source_ref}: source type is not declared")
        elif source.get_property(source_ref.name) is None:
            issues.append(f"{source_ref}: source property is not declared")
    return issues
