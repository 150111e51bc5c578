"""Logging for sqlbind.

Every logger lives under the ``sqlbind`` namespace and nothing is configured on
import. Query logging passes its context as ``extra={"extra_fields": {...}}``;
:class:`QueryContextFilter` lifts the known fields onto the record so both
formatters can use them, and :class:`StructuredFormatter` emits one JSON object
per record.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Final, TextIO

import msgspec

from sqlbind.utils.text import truncate

if TYPE_CHECKING:
    from collections.abc import Generator
    from logging import LogRecord

__all__ = (
    "QUERY_FIELDS",
    "ROOT_LOGGER_NAME",
    "QueryContextFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "query_context",
)

ROOT_LOGGER_NAME: Final = "sqlbind"
QUERY_FIELDS: Final = ("query", "parameter_count", "duration_ms", "error_type", "source", "length")
"""Context fields the connection attaches to its log records."""
MAX_LOGGED_QUERY_LENGTH: Final = 500

_TEXT_FORMAT: Final = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s%(query_suffix)s"

_correlation_id: ContextVar[str | None] = ContextVar("sqlbind_correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current context, if any."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str) -> Generator[str, None, None]:
    """Tag every record logged inside the block with ``correlation_id``.

    Scopes nest; the previous ID is restored on exit.
    """
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


def query_context(record: LogRecord) -> dict[str, Any]:
    """Return the query context fields carried by a record.

    The query text is capped at :data:`MAX_LOGGED_QUERY_LENGTH` code points and
    durations are rounded to microseconds.
    """
    extra = getattr(record, "extra_fields", None) or {}
    context = {field: extra[field] for field in QUERY_FIELDS if field in extra}
    if isinstance(context.get("query"), str):
        context["query"] = truncate(context["query"], MAX_LOGGED_QUERY_LENGTH)
    if isinstance(context.get("duration_ms"), float):
        context["duration_ms"] = round(context["duration_ms"], 3)
    return context


class QueryContextFilter(logging.Filter):
    """Attach the correlation ID and query context to every record."""

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"  # type: ignore[attr-defined]
        context = query_context(record)
        record.query_context = context  # type: ignore[attr-defined]
        record.query_suffix = f" [{context['query']}]" if "query" in context else ""  # type: ignore[attr-defined]
        return True


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, query context fields at the top level."""

    def format(self, record: LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        entry.update(getattr(record, "query_context", None) or query_context(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return msgspec.json.encode(entry, enc_hook=str).decode("utf-8")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the ``sqlbind`` namespace.

    Args:
        name: Dotted name below ``sqlbind``. Names that already start with
            ``sqlbind`` are used as given.

    Returns:
        The logger.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send sqlbind records to a stream.

    Calling it again replaces the handler installed by the previous call;
    handlers added by the application are left alone. Records stop propagating
    to the root logger.

    Args:
        level: Logging level name for the ``sqlbind`` logger.
        format_style: ``"structured"`` for JSON lines, anything else for text.
        stream: Destination stream, ``sys.stderr`` by default.

    Returns:
        The installed handler.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.upper())
    for previous in [h for h in root_logger.handlers if getattr(h, "_sqlbind_handler", False)]:
        root_logger.removeHandler(previous)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler._sqlbind_handler = True  # type: ignore[attr-defined]
    handler.addFilter(QueryContextFilter())
    handler.setFormatter(StructuredFormatter() if format_style == "structured" else logging.Formatter(_TEXT_FORMAT))
    root_logger.addHandler(handler)
    root_logger.propagate = False
    return handler
