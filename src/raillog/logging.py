"""
Structured logging setup for raillog.

Rendered rail lines go to the reporter. This module only concerns the
library's own diagnostics (lane growth, session failures), emitted
through structlog module loggers.
"""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog for console output at *level*.

    Safe to call more than once; the last call wins.

    Args:
        level: Standard logging level name (DEBUG, INFO, ...).
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level!r}")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        cache_logger_on_first_use=False,
    )
