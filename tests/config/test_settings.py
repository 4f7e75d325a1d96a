"""Tests for ObjmapSettings: priority chain and profile resolution."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from objmap.config.settings import ObjmapSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OBJMAP_CONFIG",
        "OBJMAP_MAPPER__STRICT",
        "OBJMAP_MAPPER__MAX_DEPTH",
        "OBJMAP_PROFILE__PATH",
        "OBJMAP_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)


def _config(directory: Path, text: str) -> Path:
    path = directory / "objmap.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    def test_no_config_file(self, tmp_path: Path) -> None:
        settings = ObjmapSettings.from_cli(start=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.mapper.strict is False
        assert settings.profile_path is None

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = ObjmapSettings.from_cli(start=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True


class TestTomlSource:
    def test_sections_from_discovered_file(self, tmp_path: Path) -> None:
        path = _config(tmp_path, "[mapper]\nstrict = true\nmax_depth = 10\n")
        settings = ObjmapSettings.from_cli(start=tmp_path)
        assert settings.config_path == path.resolve()
        assert settings.mapper.strict is True
        assert settings.mapper.max_depth == 10

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        other = tmp_path / "custom.toml"
        other.write_text("[mapper]\ndetect_cycles = false\n", encoding="utf-8")
        settings = ObjmapSettings.from_cli(config_path=str(other), start=tmp_path)
        assert settings.config_path == other
        assert settings.mapper.detect_cycles is False

    def test_missing_explicit_config_is_ignored(self, tmp_path: Path) -> None:
        settings = ObjmapSettings.from_cli(config_path=str(tmp_path / "nope.toml"))
        assert settings.config_path is None

    def test_invalid_toml(self, tmp_path: Path) -> None:
        _config(tmp_path, "[mapper\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            ObjmapSettings.from_cli(start=tmp_path)

    def test_profile_path_relative_to_config(self, tmp_path: Path) -> None:
        nested = tmp_path / "project"
        nested.mkdir()
        _config(nested, '[profile]\npath = "maps/views.toml"\n')
        settings = ObjmapSettings.from_cli(start=nested)
        assert settings.profile_path == nested.resolve() / "maps" / "views.toml"

    def test_absolute_profile_path(self, tmp_path: Path) -> None:
        target = tmp_path / "views.toml"
        _config(tmp_path, f'[profile]\npath = "{target.as_posix()}"\n')
        assert ObjmapSettings.from_cli(start=tmp_path).profile_path == target

    def test_pyproject_tool_table(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            '[project]\nname = "views"\n\n'
            '[tool.objmap.mapper]\nstrict = true\n\n'
            '[tool.objmap.profile]\npath = "views.toml"\n',
            encoding="utf-8",
        )
        settings = ObjmapSettings.from_cli(start=tmp_path)
        assert settings.config_path == pyproject.resolve()
        assert settings.mapper.strict is True
        assert settings.profile_path == tmp_path.resolve() / "views.toml"


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _config(tmp_path, "[mapper]\nstrict = false\nmax_depth = 10\n")
        monkeypatch.setenv("OBJMAP_MAPPER__STRICT", "true")
        settings = ObjmapSettings.from_cli(start=tmp_path)
        assert settings.mapper.strict is True
        assert settings.mapper.max_depth == 10

    def test_cli_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OBJMAP_VERBOSE", "false")
        settings = ObjmapSettings.from_cli(start=tmp_path, verbose=True)
        assert settings.verbose is True
