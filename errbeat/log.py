"""Structured logging for errbeat's own output.

Provides:
- Application-wide structlog configuration for apps that have none
- Level-filtered loggers for clients
- Mapping of event levels onto logger methods
"""

import logging
import sys
from typing import Any, Callable, Optional

import structlog

from .constants import LOGGER_METHODS

_NUMERIC_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structlog on top of the standard library.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Output logs as JSON
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(level: str = "info", logger: Optional[Any] = None) -> Any:
    """Get the logger a client writes to.

    Args:
        level: Minimum level of the default logger
        logger: Logger to use as-is instead of the default

    Returns:
        A structlog-compatible logger
    """
    if logger is not None:
        return logger
    return structlog.wrap_logger(
        None,
        wrapper_class=structlog.make_filtering_bound_logger(
            _NUMERIC_LEVELS.get(level.lower(), logging.INFO)
        ),
        logger_name="errbeat",
    )


def log_method(logger: Any, level: Optional[str]) -> Callable[..., Any]:
    """Return the method of `logger` matching an event level name."""
    name = LOGGER_METHODS.get((level or "error").lower(), "error")
    return getattr(logger, name)
