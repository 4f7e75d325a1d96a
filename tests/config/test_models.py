"""Tests for the pydantic config models."""

from __future__ import annotations

import pydantic
import pytest

from objmap.config.models import MapperConfig, ObjmapConfig, PluginsConfig, ProfileConfig


class TestMapperConfig:
    def test_defaults(self) -> None:
        config = MapperConfig()
        assert config.strict is False
        assert config.max_depth == 64
        assert config.detect_cycles is True

    def test_unbounded_depth(self) -> None:
        assert MapperConfig(max_depth=None).max_depth is None

    def test_depth_must_be_positive(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            MapperConfig(max_depth=0)

    def test_frozen(self) -> None:
        config = MapperConfig()
        with pytest.raises(pydantic.ValidationError):
            config.strict = True  # type: ignore[misc]


class TestObjmapConfig:
    def test_sections_default(self) -> None:
        config = ObjmapConfig()
        assert config.mapper == MapperConfig()
        assert config.profile == ProfileConfig()
        assert config.plugins == PluginsConfig()
        assert config.plugins.entry_points is True
        assert config.plugins.disabled == []

    def test_sparse_override(self) -> None:
        config = ObjmapConfig.model_validate({"mapper": {"strict": True}})
        assert config.mapper.strict is True
        assert config.mapper.max_depth == 64
