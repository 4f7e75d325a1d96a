"""Subcommand modules for objmap.

Provides register_commands() which uses deferred imports to keep
``objmap --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from objmap.commands.check import check
    from objmap.commands.converters import converters
    from objmap.commands.map_cmd import map_cmd

    cli.add_command(map_cmd)
    cli.add_command(check)
    cli.add_command(converters)
