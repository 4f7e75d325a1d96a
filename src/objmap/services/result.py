"""Result types: mapping reports and the CLI service envelope.

``MappingResult`` pairs a mapped value with the resolution gaps met while
producing it. ``ServiceResult`` is the envelope every CLI-facing service
method returns; commands and the output layer consume only that type.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class GapKind(StrEnum):
    """Why a destination property was left unpopulated."""

    MISSING_SOURCE_PROPERTY = "missing_source_property"
    UNRESOLVED_TYPE = "unresolved_type"
    SOURCE_TYPE_MISMATCH = "source_type_mismatch"
    EMPTY_RULE = "empty_rule"
    NOT_AN_OBJECT = "not_an_object"
    NOT_AN_ARRAY = "not_an_array"
    NOT_A_SCALAR = "not_a_scalar"


class MappingGap(BaseModel):
    """A single resolution gap, located by its dotted destination path."""

    model_config = {"frozen": True}

    kind: GapKind
    path: str
    detail: str = ""

    def __str__(self) -> str:
        suffix = f": {self.detail}" if self.detail else ""
        return f"{self.path} [{self.kind.value}]{suffix}"


class MappingResult(BaseModel):
    """A mapped value plus every gap recorded while mapping it.

    Attributes:
        value: The populated destination (or None).
        gaps: Resolution gaps in the order they were met.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    value: Any = None
    gaps: list[MappingGap] = Field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.gaps

    def gaps_of(self, kind: GapKind) -> list[MappingGap]:
        return [gap for gap in self.gaps if gap.kind == kind]


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type of the CLI-facing services.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"map"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues (mapping gaps, skipped plugins).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (counts, timing).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
