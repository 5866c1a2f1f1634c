"""Logging configuration for annex-mega."""

import logging
import sys

import structlog


def configure_logging(level: str = "WARNING") -> None:
    """
    Route structlog output to stderr.

    Stdout carries the protocol, so nothing else may ever be written there.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def ensure_logging_configured(level: str = "WARNING") -> None:
    """
    Configure logging unless the host application already did.

    structlog's built-in defaults print to stdout, which would interleave log
    lines with protocol lines.
    """
    if not structlog.is_configured():
        configure_logging(level)
