"""AppContext: shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Owns the plugin manager (loaded lazily) and the
result emission rules (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from objmap.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from objmap.config.settings import ObjmapSettings
    from objmap.plugins.manager import PluginManager
    from objmap.services.mapping import MappingService
    from objmap.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ObjmapSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from objmap.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (entry points loaded on first access)."""
        if self._plugins is None:
            from objmap.plugins.manager import PluginManager

            self._plugins = PluginManager()
            if self.settings.plugins.entry_points:
                self._plugins.discover_and_load(disabled=self.settings.plugins.disabled)
        return self._plugins

    @property
    def service(self) -> MappingService:
        from objmap.services.mapping import MappingService

        return MappingService(self.plugins, self.settings.mapper)

    def resolve_profile(self, profile: str | None) -> Path:
        """Explicit profile argument, else ``[profile] path`` from config."""
        if profile:
            return Path(profile)
        configured = self.settings.profile_path
        if configured is None:
            msg = "No profile given and no [profile] path configured"
            raise click.UsageError(msg)
        return configured

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr so piped output stays clean.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output and not settings.quiet:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
