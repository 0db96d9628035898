"""
Structured logging for the Bookshelf service.

Every log line is emitted through structlog. Request and user identifiers are
kept in context variables so they follow a request across resolvers and
subscriptions without being passed around.
"""

import logging
import secrets
import sys
from contextvars import ContextVar
from typing import Any

import structlog

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_user_id: ContextVar[str | None] = ContextVar("user_id", default=None)

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("uvicorn.access", "aiosqlite", "asyncio")


def add_request_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor stamping the current request and user ids."""
    request_id = _request_id.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    user_id = _user_id.get()
    if user_id:
        event_dict.setdefault("user_id", user_id)

    return event_dict


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Route stdlib logging and structlog to stdout.

    Args:
        debug: Render colored console lines instead of JSON and default to DEBUG
        level: Explicit level name; overrides the level implied by ``debug``
    """
    if level is None:
        level = "DEBUG" if debug else "INFO"
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def new_request_id() -> str:
    """Short random id used to correlate the log lines of one request."""
    return secrets.token_urlsafe(9)


def set_request_context(request_id: str | None = None) -> str:
    """Start a logging context for a request and return its id."""
    request_id = request_id or new_request_id()
    _request_id.set(request_id)
    _user_id.set(None)
    return request_id


def set_user_context(user_id: str | None) -> None:
    """Attach the authenticated user to the current request context."""
    _user_id.set(user_id)


def clear_request_context() -> None:
    _request_id.set(None)
    _user_id.set(None)


def get_request_id() -> str | None:
    return _request_id.get()
