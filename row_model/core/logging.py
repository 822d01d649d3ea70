"""Structured logging for RowModel.

Library modules only ever call :func:`get_logger`; applications (or
tests) opt into output with :func:`configure_logging`.

    >>> from row_model.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG")
    >>> get_logger(__name__).debug("table_name_resolved", table="users")
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from row_model.core.settings import get_settings


def configure_logging(level: str | None = None, json_format: bool | None = None) -> None:
    """Configure structlog for the application.

    Args:
        level: Log level name; defaults to ``RowModelSettings.log_level``.
        json_format: JSON output instead of the console renderer; defaults
            to ``RowModelSettings.log_json``.
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    if json_format is None:
        json_format = settings.log_json

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)
