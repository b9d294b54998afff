"""Structured logging configuration.

Configures structlog once at startup. Output goes to stderr as JSON,
or as a coloured console stream when debug is enabled.
"""

import logging
import sys

import structlog

from storefront.infrastructure.config import settings


def configure_logging(log_level: str | None = None, debug: bool | None = None) -> None:
    """Configure structlog processors and level filtering.

    Args:
        log_level: Minimum level name (defaults to settings.log_level).
        debug: Use the console renderer (defaults to settings.debug).
    """
    level_name = (log_level or settings.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    use_console = settings.debug if debug is None else debug

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if use_console:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
