"""Structured logging for the administration services, built on structlog.

Every record carries the application name and environment. Development
gets a readable console renderer; all other environments emit JSON lines.
"""

from __future__ import annotations

import functools
import logging
import sys
import time
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar, cast

import structlog
from structlog.typing import EventDict, WrappedLogger

from consult_admin.core.config import settings

BoundLogger = structlog.stdlib.BoundLogger

P = ParamSpec("P")
R = TypeVar("R")

_QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "asyncpg": logging.WARNING,
    "passlib": logging.ERROR,
}


def add_app_context(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("app", settings.APP_NAME)
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def setup_logging() -> None:
    """Configure structlog and the stdlib root handler."""
    renderer: structlog.typing.Processor = (
        structlog.dev.ConsoleRenderer()
        if settings.is_development
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_app_context,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
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
        level=getattr(logging, settings.LOG_LEVEL),
    )

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> BoundLogger:
    return cast(BoundLogger, structlog.get_logger(name or "consult_admin"))


def log_function_call(
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R]]:
    """Log entry, duration and failure of a service coroutine.

    Only argument counts and keyword names are recorded, never values, so
    credentials passed through request objects stay out of the logs.
    """
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start_time = time.perf_counter()
        logger.debug(
            "Service call started",
            operation=func.__qualname__,
            args_count=len(args),
            kwargs=sorted(kwargs),
        )

        try:
            result = await func(*args, **kwargs)
        except Exception:
            logger.error(
                "Service call failed",
                operation=func.__qualname__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                exc_info=True,
            )
            raise

        logger.debug(
            "Service call finished",
            operation=func.__qualname__,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            succeeded=getattr(result, "succeeded", None),
        )
        return result

    return wrapper


setup_logging()
