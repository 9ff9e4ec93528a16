"""Structured logging configuration.

This module initializes structlog with a stable JSON format.
Log lines go to stderr so stdout only carries command output.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV_VAR


def resolve_log_level(raw_level: str | None) -> int:
    """Map a level name to a stdlib level number.

    Unknown or empty names resolve to the default level.
    """
    name = (raw_level or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.getLevelName(DEFAULT_LOG_LEVEL)


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured JSON output, filtered by
        the level named in ``QUILL_LOG_LEVEL``.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            resolve_log_level(os.environ.get(LOG_LEVEL_ENV_VAR))
        ),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
    return structlog.get_logger(name)


def _stderr_logger(*_args: Any) -> structlog.PrintLogger:
    """Build a print logger bound to the current ``sys.stderr``.

    Loggers are rebuilt per call so a replaced or closed stderr is never
    written to after the swap.
    """
    return structlog.PrintLogger(file=sys.stderr)
