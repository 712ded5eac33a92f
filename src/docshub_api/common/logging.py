"""Process-wide console logging for the DocsHub API.

One line per record::

    2026-03-02T10:15:00.302Z INFO  docshub_api.features.sharing.service [cid=01J…] share.link.create workspace_id=01J… document_id=doc-1

Event names go in the message; identifiers go in ``extra`` so they can be
grepped as ``key=value`` pairs. Use :func:`log_context` to build that payload.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from docshub_api.settings import Settings

_correlation_id: ContextVar[str | None] = ContextVar("docshub_correlation_id", default=None)

# Every attribute a bare LogRecord carries, plus the ones formatting adds.
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "correlation_id", "taskName", "color_message"}

_ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "alembic", "sqlalchemy")

_installed_handler: logging.Handler | None = None


class ConsoleLogFormatter(logging.Formatter):
    """Single-line formatter with UTC millisecond timestamps and trailing extras."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-5s %(name)s [cid=%(correlation_id)s] %(message)s",
        )

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=UTC)
        return stamp.strftime(datefmt or "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = _correlation_id.get() or "-"
        line = super().format(record)
        pairs = [
            f"{key}={_render(value)}"
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        ]
        return " ".join([line, *pairs]) if pairs else line


def setup_logging(settings: Settings) -> None:
    """Route all logging through one console handler at ``settings.logging_level``.

    Safe to call repeatedly: later calls only change the level.
    """

    global _installed_handler
    level = logging.getLevelName(settings.logging_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if _installed_handler is not None and _installed_handler in root.handlers:
        return

    _installed_handler = logging.StreamHandler()
    _installed_handler.setFormatter(ConsoleLogFormatter())
    root.handlers = [_installed_handler]

    # Library loggers drop their own handlers so lines share one format.
    for name in _ROUTED_LOGGERS:
        library_logger = logging.getLogger(name)
        library_logger.handlers.clear()
        library_logger.propagate = True


def bind_request_context(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


def clear_request_context() -> None:
    _correlation_id.set(None)


def current_correlation_id() -> str | None:
    return _correlation_id.get()


def log_context(**fields: Any) -> dict[str, Any]:
    """Return ``fields`` without the ``None`` values, ready for ``extra=``.

    Typical keys are ``workspace_id``, ``member_id``, ``policy_id``,
    ``document_id`` and ``user_id``.
    """

    return {key: value for key, value in fields.items() if value is not None}


def _render(value: Any) -> str:
    return "null" if value is None else str(value)


__all__ = [
    "ConsoleLogFormatter",
    "bind_request_context",
    "clear_request_context",
    "current_correlation_id",
    "log_context",
    "setup_logging",
]
