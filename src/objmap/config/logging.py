"""structlog setup for the objmap CLI.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, by the CLI, and nowhere else. Records from stdlib loggers
and from structlog loggers share one processor chain and one stderr
handler:

- Human (default): console renderer, colored when stderr is a terminal
- JSON (``--log-json``): one JSON object per line

Every record carries the running subcommand as ``command`` once
:func:`bind_command` has been called.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

HANDLER_NAME = "objmap-cli"
QUIET_LOGGERS = ("pluggy",)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install the objmap handler on the root logger and return it.

    Only a handler previously installed by this function is replaced;
    handlers added by a host application (or pytest) stay in place.

    Args:
        verbose: DEBUG for the ``objmap`` logger tree; WARNING otherwise.
        log_json: Use the JSON renderer instead of the console renderer.
        stream: Where records go; ``sys.stderr`` at call time by default.
    """
    stream = stream or sys.stderr
    shared = _shared_processors()

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=stream.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("objmap").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


def bind_command(command: str | None) -> None:
    """Tag subsequent records with *command*; None clears the tag."""
    structlog.contextvars.unbind_contextvars("command")
    if command:
        structlog.contextvars.bind_contextvars(command=command)
