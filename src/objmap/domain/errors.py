"""Exception hierarchy for objmap.

Only construction problems and graph-shape problems are errors. Resolution
gaps (no rule, no same-named source property, unresolvable declared type)
are never raised unless the caller opts into strict mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


class ObjmapError(Exception):
    """Base class for every error raised by objmap itself."""


class MalformedReferenceError(ObjmapError, ValueError):
    """A ``"Type::property"`` string could not be parsed."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Malformed property reference {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class RegistryFrozenError(ObjmapError, RuntimeError):
    """A registration was attempted after the registry was frozen."""


class UnknownTypeError(ObjmapError, KeyError):
    """An explicit catalog lookup named a type that was never registered."""

    def __init__(self, type_name: str) -> None:
        super().__init__(type_name)
        self.type_name = type_name

    def __str__(self) -> str:
        return f"Unknown type: {self.type_name!r}"


class CyclicGraphError(ObjmapError):
    """A source object was reached again while it was still being mapped."""

    def __init__(self, path: str, type_name: str) -> None:
        super().__init__(f"Cyclic object graph at {path} (source type {type_name})")
        self.path = path
        self.type_name = type_name


class MaxDepthExceededError(ObjmapError):
    """Nesting went deeper than ``MapperConfig.max_depth``."""

    def __init__(self, path: str, max_depth: int) -> None:
        super().__init__(f"Mapping depth exceeded {max_depth} at {path}")
        self.path = path
        self.max_depth = max_depth


class IncompleteMappingError(ObjmapError):
    """Strict mode: the mapping finished with resolution gaps."""

    def __init__(self, gaps: Sequence[Any], value: Any = None) -> None:
        listed = ", ".join(f"{gap.path} ({gap.kind})" for gap in gaps[:5])
        more = f" and {len(gaps) - 5} more" if len(gaps) > 5 else ""
        super().__init__(f"Mapping incomplete: {listed}{more}")
        self.gaps = list(gaps)
        self.value = value


class ProfileError(ObjmapError):
    """A mapping profile file is invalid."""


class DocumentError(ObjmapError):
    """A JSON document could not be read or does not fit its declared type."""
