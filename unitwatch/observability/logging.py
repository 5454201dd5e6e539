"""Structured logging configuration using structlog.

Log events go to stderr as JSON lines; stdout belongs to the transition
echo so the two streams can be redirected independently.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog


def setup_logging(
    level: str = "info",
    stream: TextIO | None = None,
    cache_loggers: bool = True,
) -> None:
    """Configure structlog for JSON output.

    Args:
        level:         Minimum level to emit (debug, info, warning, error).
        stream:        Where rendered lines are written. Defaults to stderr.
        cache_loggers: Freeze each logger's configuration on first use.
                       Tests that reconfigure logging pass False.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream if stream is not None else sys.stderr),
        cache_logger_on_first_use=cache_loggers,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
