"""
Logging configuration using structlog
"""

import logging
import secrets
import sys
import typing
from contextvars import ContextVar

import structlog

request_id_ctx: ContextVar[typing.Optional[str]] = ContextVar('request_id', default=None)


class RequestContextFilter:
    """Add the current request id to every event."""

    def __call__(self, logger: typing.Any, method_name: str, event_dict: typing.Dict[str, typing.Any]):
        _ = logger, method_name

        request_id = request_id_ctx.get()
        if request_id:
            event_dict['request_id'] = request_id
        return event_dict


def configure_logging(debug: bool = False, log_level: str = None) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        debug: If True, use human-readable console output. If False, use JSON.
        log_level: Level name; defaults to DEBUG in debug mode, INFO otherwise.
    """
    if log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(level=level, stream=sys.stdout, format='%(message)s', force=True)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        RequestContextFilter(),
        structlog.processors.TimeStamper(fmt='ISO', utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_request_context(request_id: str = None) -> str:
    if request_id is None:
        request_id = secrets.token_urlsafe(8)
    request_id_ctx.set(request_id)
    return request_id


def clear_request_context() -> None:
    request_id_ctx.set(None)
