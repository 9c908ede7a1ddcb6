"""Structured logging for the shell.

Log output goes to a file by default so it never interleaves with the
prompt. Passing ``"stderr"`` or ``"stdout"`` as destination logs to the
terminal instead (useful with ``-c``).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def resolve_level(level: str | None, default: int = logging.WARNING) -> int:
    """Map a level name to a stdlib logging level."""
    if not level:
        return default
    return _LEVEL_MAP.get(level.upper(), default)


def _create_handler(destination: str) -> logging.Handler:
    """Create handler for stderr, stdout, or file path."""
    handler: logging.Handler
    if destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(destination).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    return handler


def configure_logging(*, level: str = "WARNING", destination: str | Path = "stderr") -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        destination: "stderr", "stdout", or a log file path.
    """
    default_level = resolve_level(level)
    destination = str(destination)
    is_console = destination in ("stderr", "stdout")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(default_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Don't cache - allows reconfiguration and respects level changes
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(default_level)

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(
            colors=is_console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        ),
        foreign_pre_chain=shared_processors,
    )

    handler = _create_handler(destination)
    handler.setLevel(default_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str | None = None, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Lazy logger: configuration is read at each use, not at creation.

    Module-level loggers are created at import time, before
    ``configure_logging`` runs, so nothing may be bound here eagerly.
    """
    args = (name,) if name else ()
    return structlog.get_logger(*args, **initial_values)  # type: ignore[no-any-return]
