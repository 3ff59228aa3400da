"""
Structured logging setup.

Routes structlog through the standard library so that uvicorn, Motor and
application loggers share one level and one output format.
"""

import logging
import sys

import structlog

from matchday.config.settings import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the root stdlib logger from settings."""
    app = settings.app
    pretty = app.debug or app.environment == "development"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, app.log_level),
        force=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if pretty
        else structlog.processors.JSONRenderer()
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
