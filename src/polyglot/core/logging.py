"""structlog setup shared by the server, the catalog loader and the error mapper."""

import logging
import sys
from typing import Any

import structlog
from structlog import contextvars

from polyglot.core.config import settings


def setup_logging(*, json_logs: bool | None = None) -> None:
    """Route structlog through stdlib logging.

    Local runs get a colored console renderer, every other environment
    emits one JSON object per line. ``json_logs`` overrides the choice.
    """
    log_level = logging.DEBUG if settings.DEBUG else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    shared_processors: list[structlog.types.Processor] = [
        contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs is None:
        json_logs = settings.ENVIRONMENT != "local"

    processors: list[Any]
    if json_logs:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(request_id: str, **values: Any) -> None:
    """Start a fresh per-request logging context."""
    contextvars.clear_contextvars()
    contextvars.bind_contextvars(request_id=request_id, **values)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
