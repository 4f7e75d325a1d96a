"""Rich Console factory and theme for objmap output.

Consoles render into a StringIO buffer so formatters keep their
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

OBJMAP_THEME = Theme(
    {
        "objmap.ok": "bold green",
        "objmap.error": "bold red",
        "objmap.warning": "bold yellow",
        "objmap.op": "bold cyan",
        "objmap.type": "bold blue",
        "objmap.ref": "cyan",
        "objmap.dim": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=OBJMAP_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
