"""Structured logging setup for shopledger."""

import logging
import os
import sys

import structlog

DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(level: str | None = None, json_output: bool = False) -> None:
    """Configure structlog on top of the standard logging module.

    Args:
        level: Log level name. If None, checks SHOPLEDGER_LOG_LEVEL environment
            variable, then defaults to WARNING
        json_output: Render events as JSON lines instead of key=value text
    """
    if level is None:
        level = os.environ.get("SHOPLEDGER_LOG_LEVEL", DEFAULT_LOG_LEVEL)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
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
