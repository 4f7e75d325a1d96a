"""Command: list converter and resolver names from plugins."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from objmap.commands._base import ObjmapCommand

if TYPE_CHECKING:
    from objmap.commands._context import AppContext


@click.command(cls=ObjmapCommand, examples="  objmap converters\n  objmap --json converters")
@click.pass_obj
def converters(app: AppContext) -> None:
    """List converter and resolver names usable in profiles."""
    app.emit(app.service.list_capabilities())
