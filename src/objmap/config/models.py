"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, objmap.toml only contains
overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class MapperConfig(BaseModel):
    """[mapper] section: engine behaviour.

    Attributes:
        strict: Raise ``IncompleteMappingError`` when a mapping has gaps
            instead of returning a partially populated destination.
        max_depth: Maximum nesting of object mappings; None disables the
            bound.
        detect_cycles: Raise ``CyclicGraphError`` when a source object is
            reached again while it is still being mapped.
    """

    model_config = {"frozen": True}

    strict: bool = False
    max_depth: int | None = Field(default=64, ge=1)
    detect_cycles: bool = True


class ProfileConfig(BaseModel):
    """[profile] section: where mapping profiles come from."""

    model_config = {"frozen": True}

    path: str | None = None


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    entry_points: bool = True
    disabled: list[str] = Field(default_factory=list)


class ObjmapConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    mapper: MapperConfig = Field(default_factory=MapperConfig)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
