"""Logging configuration and helpers for the Boda API.

This module configures console-style logging for the entire process and exposes
helpers for binding a request-scoped correlation ID and for building consistent
``extra`` payloads for structured logs.

Everything uses the standard :mod:`logging` library. The only customization is
the formatter, which renders one human-readable line per log record, including
timestamp, level, logger name, correlation ID, and any ``extra`` fields as
``key=value`` pairs.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from boda_api.settings import Settings

# ---------------------------------------------------------------------------
# Context and constants
# ---------------------------------------------------------------------------

# Request-scoped correlation ID, set/cleared by RequestContextMiddleware.
_CORRELATION_ID: ContextVar[str | None] = ContextVar(
    "boda_api_correlation_id",
    default=None,
)

# Attributes that are already handled by logging and should not be copied into
# the extra key=value list.
_STANDARD_ATTRS: set[str] = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "message",
    "asctime",
    "correlation_id",
    "taskName",
    "color_message",
}

_CONFIGURED_FLAG = "_boda_configured"


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------


class ConsoleLogFormatter(logging.Formatter):
    """Render log records as single-line console output.

    Example line:

        2026-02-14T18:03:11.120Z INFO  boda_api.features.public.service [cid=9f1c]
        public.rsvp.success wedding_id=... guest_id=... rsvp_status=attending
    """

    _time_format = "%Y-%m-%dT%H:%M:%S"

    def __init__(self) -> None:
        fmt = "%(asctime)s %(levelname)-5s %(name)s [cid=%(correlation_id)s] %(message)s"
        super().__init__(fmt=fmt, datefmt=self._time_format)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.fromtimestamp(record.created, tz=UTC)
        pattern = datefmt or self._time_format
        base = dt.strftime(pattern)
        return f"{base}.{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - std signature
        cid = getattr(record, "correlation_id", None) or _CORRELATION_ID.get() or "-"
        record.correlation_id = cid

        base = super().format(record)

        extras: list[str] = []
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            extras.append(f"{key}={_format_extra_value(value)}")

        if extras:
            return f"{base} " + " ".join(extras)
        return base


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def setup_logging(settings: Settings) -> None:
    """Configure root logging for the API process.

    Installs a single console-style StreamHandler and sets the root level from
    ``settings.logging_level`` (env: ``BODA_LOGGING_LEVEL``). Uvicorn, Alembic,
    SQLAlchemy and urllib3 loggers propagate into the same root logger.
    """
    root_logger = logging.getLogger()

    level_name = settings.logging_level.upper()
    level = getattr(logging, level_name, logging.INFO)

    if getattr(root_logger, _CONFIGURED_FLAG, False):
        root_logger.setLevel(level)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(ConsoleLogFormatter())

    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in (
        "uvicorn",
        "uvicorn.error",
        "uvicorn.access",
        "alembic",
        "alembic.runtime.migration",
        "sqlalchemy",
        "urllib3",
    ):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True

    setattr(root_logger, _CONFIGURED_FLAG, True)


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


def bind_request_context(correlation_id: str | None) -> None:
    """Bind a correlation ID to the logging context for the current request."""
    _CORRELATION_ID.set(correlation_id)


def clear_request_context() -> None:
    """Clear the request-scoped logging context."""
    _CORRELATION_ID.set(None)


def log_context(
    *,
    wedding_id: str | None = None,
    guest_id: str | None = None,
    contribution_id: str | None = None,
    user_id: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a consistent ``extra`` payload for structured logs.

    Example:
        logger.info(
            "contributions.create.success",
            extra=log_context(
                wedding_id=str(wedding.id),
                contribution_id=str(contribution.id),
            ),
        )
    """
    ctx: dict[str, Any] = {}

    if wedding_id is not None:
        ctx["wedding_id"] = wedding_id
    if guest_id is not None:
        ctx["guest_id"] = guest_id
    if contribution_id is not None:
        ctx["contribution_id"] = contribution_id
    if user_id is not None:
        ctx["user_id"] = user_id

    for key, value in extra.items():
        ctx[key] = value

    return ctx


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _format_extra_value(value: Any) -> str:
    """Format an ``extra`` value for console output."""
    if isinstance(value, (int, float, bool)):
        return str(value)
    if value is None:
        return "null"
    return str(value)


__all__ = [
    "ConsoleLogFormatter",
    "bind_request_context",
    "clear_request_context",
    "log_context",
    "setup_logging",
]
