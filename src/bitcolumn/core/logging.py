"""
Structured logging for bitcolumn.

The library itself only emits a handful of events (column registration,
accessor collisions, bulk update rewrites); host applications decide how they
are rendered by calling :func:`configure_logging` once at startup.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None)
             ↓
        structlog processor chain:
          1. TimeStamper (iso)
          2. add_log_level
          3. JSONRenderer (or ConsoleRenderer when attached to a tty)

Examples:
    >>> from bitcolumn.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG")
    >>> logger = get_logger(__name__)
    >>> logger.debug("bitfield_registered", column="status", flags=4)

Tags:
    logging, structlog, observability, bitcolumn
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


def configure_logging(
    level: str | None = None,
    json_format: bool | None = None,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR); defaults to
            ``BITCOLUMN_LOG_LEVEL`` via settings
        json_format: True for JSON, False for console, None to follow
            ``BITCOLUMN_LOG_FORMAT`` (JSON if not a tty when unset)
        add_timestamp: Include ISO timestamp in logs
    """
    from bitcolumn.core.settings import get_settings

    settings = get_settings()
    log_level = (level or settings.log_level).upper()

    if json_format is None:
        if settings.log_format:
            json_format = settings.log_format.lower() == "json"
        else:
            json_format = not sys.stdout.isatty()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if add_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level),
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
]
