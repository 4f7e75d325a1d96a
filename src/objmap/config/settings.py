"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs : CLI flags passed by Click
  2. Env vars    : ``OBJMAP_*`` prefix, ``__`` for nested sections
  3. TOML file   : ``objmap.toml`` or ``[tool.objmap]``, discovered via walk-up
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from objmap.config.discovery import find_config, read_config_table
from objmap.config.models import MapperConfig, PluginsConfig, ProfileConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from ``objmap.toml`` or ``[tool.objmap]`` in ``pyproject.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = read_config_table(toml_path)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class ObjmapSettings(BaseSettings):
    """Settings for the objmap CLI.

    Attributes:
        config_path: The ``objmap.toml`` in effect, if any.
        profile_path: Profile used when a command gets none explicitly.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "OBJMAP_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    mapper: MapperConfig = Field(default_factory=MapperConfig)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def profile_path(self) -> Path | None:
        """Configured profile, resolved against the config file's directory."""
        if self.profile.path is None:
            return None
        path = Path(self.profile.path)
        if not path.is_absolute() and self.config_path is not None:
            path = self.config_path.parent / path
        return path

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> ObjmapSettings:
        """Construct settings from a CLI invocation.

        Uses *config_path* when given, otherwise walks up from *start*
        (default: cwd) for ``objmap.toml``.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
