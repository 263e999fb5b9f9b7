"""
Logging configuration for the marketplace service and client.

Every event carries the service name, version and environment. Request
scoped fields (request id, calling user) are bound as context variables by
the HTTP middleware and merged into everything logged while the request is
handled, including store and ledger logs.
"""

import logging
import sys
from typing import Optional

import structlog

from campusgig.config.settings import Settings, settings

# Library loggers kept below the application's level
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "asyncio": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    # Requests are logged by our own middleware
    "uvicorn.access": logging.WARNING,
}

JSON_ENVIRONMENTS = ("production", "staging")


def add_service_context(app_settings: Settings):
    """Processor stamping each event with the service identity."""
    context = {
        "service": app_settings.APP_NAME,
        "version": app_settings.APP_VERSION,
        "environment": app_settings.ENVIRONMENT,
    }

    def processor(logger, method_name, event_dict):
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return processor


def use_json_output(app_settings: Settings) -> bool:
    if app_settings.LOG_FORMAT == "json":
        return True
    if app_settings.LOG_FORMAT == "console":
        return False
    return app_settings.ENVIRONMENT in JSON_ENVIRONMENTS


def configure_logging(app_settings: Optional[Settings] = None) -> None:
    """Configure structured logging."""
    app_settings = app_settings or settings

    if use_json_output(app_settings):
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_service_context(app_settings),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, app_settings.LOG_LEVEL),
    )
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def bind_request_context(**fields) -> None:
    """Bind fields to every event logged in the current request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str = None) -> structlog.BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)
