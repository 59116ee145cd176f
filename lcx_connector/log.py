"""
Structured logging setup.

Modules obtain their logger with ``structlog.get_logger(__name__)`` and log
snake_case events with keyword context; this module wires structlog to the
standard library so both end up in the same stream.
"""

import logging

import structlog

from lcx_connector.config.models import LogFormat, LogLevel, LoggingConfig


def setup_logging(
    level: LogLevel | str = LogLevel.INFO,
    fmt: LogFormat | str = LogFormat.JSON,
) -> None:
    """
    Configure structlog and standard logging.

    Args:
        level: Minimum log level.
        fmt: "json" for machine readable output, "text" for the console renderer.
    """
    level_name = LogLevel(str(getattr(level, "value", level)).upper()).value
    log_format = LogFormat(getattr(fmt, "value", fmt))

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == LogFormat.JSON
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name),
    )

    # aiohttp access noise
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def setup_logging_from_config(config: LoggingConfig) -> None:
    """Configure logging from the ``logging`` config section."""
    setup_logging(level=config.level, fmt=config.format)
