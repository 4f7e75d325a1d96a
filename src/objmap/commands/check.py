"""Command: validate a mapping profile."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from objmap.commands._base import ObjmapCommand

if TYPE_CHECKING:
    from objmap.commands._context import AppContext


@click.command(
    cls=ObjmapCommand,
    examples="""\
  objmap check views.toml
  objmap --json check views.toml
  objmap check --fail-on-issues views.toml""",
)
@click.argument("profile", required=False)
@click.option("--fail-on-issues", is_flag=True, help="Exit 1 when issues are found.")
@click.pass_obj
def check(app: AppContext, profile: str | None, fail_on_issues: bool) -> None:
    """List a profile's types and rules and flag undeclared references."""
    result = app.service.check_profile(app.resolve_profile(profile))
    if fail_on_issues and result.ok and not result.data["healthy"]:
        from objmap.services.result import ServiceError

        result = result.model_copy(
            update={
                "ok": False,
                "error": ServiceError(
                    code="PROFILE_ISSUES",
                    message=f"{len(result.data['issues'])} issue(s) found",
                    detail={"issues": result.data["issues"]},
                ),
            }
        )
    app.emit(result)
