"""Logging configuration and helpers for credgate.

Resolution code logs through module loggers with event-style messages
(``"evaluator.empty_group"``) and structured ``extra`` payloads built by
:func:`log_context`. :func:`setup_logging` installs a single stderr handler
rendering either one readable line per record or one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from credgate.settings import Settings

# ---------------------------------------------------------------------------
# Context and constants
# ---------------------------------------------------------------------------

# Session ID of the actor whose credentials are being evaluated.
_SESSION_ID: ContextVar[str | None] = ContextVar("credgate_session_id", default=None)

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
    "session_id",
    "taskName",
}

_CONFIGURED_FLAG = "_credgate_configured"


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def _format_timestamp(created: float) -> str:
    return (
        datetime.fromtimestamp(created, tz=UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class ConsoleLogFormatter(logging.Formatter):
    """Render log records as single-line console output.

    Example line:

        2026-10-19T09:12:44.102Z WARNING credgate.evaluator [sid=-] evaluator.empty_group
        surface=contract_wizard element_id=remarks
    """

    _time_format = "%Y-%m-%dT%H:%M:%S"

    def __init__(self) -> None:
        fmt = "%(asctime)s %(levelname)-5s %(name)s [sid=%(session_id)s] %(message)s"
        super().__init__(fmt=fmt, datefmt=self._time_format)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.fromtimestamp(record.created, tz=UTC)
        base = dt.strftime(datefmt or self._time_format)
        return f"{base}.{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - std signature
        record.session_id = getattr(record, "session_id", None) or _SESSION_ID.get() or "-"
        base = super().format(record)

        extras = [f"{key}={_format_extra_value(value)}" for key, value in _record_extras(record).items()]
        if extras:
            return f"{base} " + " ".join(extras)
        return base


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - matches logging.Formatter API
        payload: dict[str, Any] = {
            "ts": _format_timestamp(record.created),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            "session_id": getattr(record, "session_id", None) or _SESSION_ID.get(),
        }

        data = _record_extras(record)
        if data:
            payload["data"] = data

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            payload["exc_type"] = getattr(exc_type, "__name__", None)
            payload["exc"] = str(exc)
            payload["traceback"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, ensure_ascii=False, default=str)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def setup_logging(settings: Settings) -> None:
    """Configure the ``credgate`` logger hierarchy.

    Installs one stderr handler using the formatter selected by
    ``settings.log_format`` and sets the level from ``settings.logging_level``.
    Subsequent calls only adjust the level and formatter.
    """

    base_logger = logging.getLogger("credgate")
    level = logging.getLevelNamesMapping().get(settings.logging_level.upper(), logging.INFO)
    formatter: logging.Formatter = (
        JsonFormatter() if settings.log_format == "ndjson" else ConsoleLogFormatter()
    )

    if getattr(base_logger, _CONFIGURED_FLAG, False):
        base_logger.setLevel(level)
        for handler in base_logger.handlers:
            handler.setFormatter(formatter)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    base_logger.handlers = [handler]
    base_logger.setLevel(level)
    base_logger.propagate = False

    setattr(base_logger, _CONFIGURED_FLAG, True)


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


def bind_session_context(session_id: str | None) -> None:
    """Bind the actor session ID to the logging context."""
    _SESSION_ID.set(session_id)


def clear_session_context() -> None:
    _SESSION_ID.set(None)


def log_context(
    *,
    surface: str | None = None,
    element_id: str | None = None,
    toggle_id: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a consistent `extra` payload for structured logs.

    Example:
        logger.warning(
            "evaluator.empty_group",
            extra=log_context(surface=schema.name, element_id=spec.id),
        )
    """
    ctx: dict[str, Any] = {}

    if surface is not None:
        ctx["surface"] = surface
    if element_id is not None:
        ctx["element_id"] = element_id
    if toggle_id is not None:
        ctx["toggle_id"] = toggle_id

    for key, value in extra.items():
        ctx[key] = value

    return ctx


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _format_extra_value(value: Any) -> str:
    if isinstance(value, (int, float, bool)):
        return str(value)
    if value is None:
        return "null"
    return str(value)


__all__ = [
    "ConsoleLogFormatter",
    "JsonFormatter",
    "bind_session_context",
    "clear_session_context",
    "log_context",
    "setup_logging",
]
