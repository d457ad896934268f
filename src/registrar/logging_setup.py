"""structlog configuration for the CLI.

Log events go to standard error so standard output only carries program
output (banner, enrollment result, page tables).
"""

from __future__ import annotations

import logging
import sys

import structlog

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class _StderrLoggerFactory:
    """Build a PrintLogger bound to whatever sys.stderr is at call time."""

    def __call__(self, *args) -> structlog.PrintLogger:
        return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "warning") -> None:
    """Configure structlog with a level filter.

    Args:
        level: One of debug, info, warning, error, critical.

    Raises:
        ValueError: If level is not a known level name.
    """
    try:
        numeric = LEVELS[level.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown log level '{level}' (expected one of: {', '.join(LEVELS)})"
        ) from None

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=_StderrLoggerFactory(),
        cache_logger_on_first_use=False,
    )
