"""Command: map a JSON document through a profile."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from objmap.commands._base import ObjmapCommand

if TYPE_CHECKING:
    from objmap.commands._context import AppContext


@click.command(
    "map",
    cls=ObjmapCommand,
    examples="""\
  objmap map views.toml customer.json --from Customer --into CustomerView
  objmap --json map views.toml order.json -f Order -i OrderView
  objmap map views.toml order.json -f Order -i OrderView --strict""",
)
@click.argument("profile", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("source", type=click.Path(dir_okay=False, path_type=Path))
@click.option("-f", "--from", "source_type", required=True, help="Declared type of SOURCE.")
@click.option("-i", "--into", required=True, help="Destination type.")
@click.option(
    "--strict/--lenient",
    default=None,
    help="Fail when any property cannot be resolved (default from config).",
)
@click.pass_obj
def map_cmd(
    app: AppContext,
    profile: Path,
    source: Path,
    source_type: str,
    into: str,
    strict: bool | None,
) -> None:
    """Map the JSON document SOURCE using the rules in PROFILE."""
    app.emit(
        app.service.map_document(
            profile,
            source,
            into=into,
            source_type=source_type,
            strict=strict,
        )
    )
