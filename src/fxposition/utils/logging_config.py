"""Structured logging configuration for fxposition.

Uses structlog with context variables, ISO timestamps, and console rendering
to stderr so command output on stdout stays clean. Provides configure_logging()
for one-time setup.
"""

import logging
import sys

import structlog

_configured = False


def _stderr_logger(*args) -> structlog.PrintLogger:
    # Looked up per call so a swapped sys.stderr (tests, CliRunner) is honored.
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(level: str = "WARNING") -> None:
    """Configure structlog processors once.

    Safe to call multiple times -- only the first invocation takes effect.

    Args:
        level: Minimum level name, e.g. "DEBUG" or "WARNING"
    """
    global _configured
    if _configured:
        return

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
    _configured = True
