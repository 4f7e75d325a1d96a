"""Rich/JSON output for ServiceResult.

Machines get the ServiceResult as JSON (``--json``). Humans get a short
Rich rendering per operation: the mapped document for ``map``, tables of
types and rules for ``check``, and name lists for ``converters``.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from objmap.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from objmap.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How a result should be rendered."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Render *result* as JSON or as human-readable text."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        code = f" [{result.error.code}]" if result.error else ""
        return f"ERROR: {result.op}{code}: {message}"

    if result.op == "map":
        # The mapped document is the payload; keep it pipeable.
        return _json.dumps(result.data.get("result"), indent=2, sort_keys=False)

    console = create_console()
    if settings.quiet:
        console.print(f"[objmap.ok]OK[/]: {result.op}")
        return get_output(console).rstrip("\n")

    renderer = _RENDERERS.get(result.op, _render_generic)
    renderer(console, result.data, verbose=settings.verbose)
    return get_output(console).rstrip("\n")


def _render_generic(console: Console, data: dict[str, Any], *, verbose: bool) -> None:
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            value = _json.dumps(value, separators=(",", ":"))
        console.print(f"  [objmap.dim]{escape(key)}:[/] {escape(str(value))}")


def _render_check(console: Console, data: dict[str, Any], *, verbose: bool) -> None:
    status = "[objmap.ok]healthy[/]" if data.get("healthy") else "[objmap.warning]issues found[/]"
    console.print(f"[objmap.op]check[/] {escape(data.get('profile', ''))}: {status}")

    types = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    types.add_column("Type", style="objmap.type")
    types.add_column("Property")
    types.add_column("Declared type", style="objmap.dim")
    for entry in data.get("types", []):
        name = escape(entry["name"])
        properties = entry["properties"]
        if not properties:
            types.add_row(name, "-", "-")
        for index, (prop, declared) in enumerate(properties.items()):
            types.add_row(name if index == 0 else "", escape(prop), escape(declared or "-"))
    console.print(types)

    rules = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    rules.add_column("For", style="objmap.ref")
    rules.add_column("From", style="objmap.ref")
    rules.add_column("Via")
    for rule in data.get("rules", []):
        via = rule.get("converter") or ""
        if rule.get("resolver") and not rule.get("from"):
            via = f"resolve: {rule['resolver']}"
        rules.add_row(escape(rule["for"]), escape(rule.get("from") or "-"), escape(via))
    if data.get("rules"):
        console.print(rules)

    for issue in data.get("issues", []):
        console.print(f"[objmap.warning]![/] {escape(issue)}")


def _render_converters(console: Console, data: dict[str, Any], *, verbose: bool) -> None:
    for key in ("converters", "resolvers"):
        names = ", ".join(data.get(key, [])) or "-"
        console.print(f"[objmap.op]{key}[/]: {escape(names)}")
    if verbose:
        plugins = ", ".join(data.get("plugins", []))
        console.print(f"[objmap.dim]plugins: {escape(plugins)}[/]")


_RENDERERS = {
    "check": _render_check,
    "converters": _render_converters,
}
