"""Structured JSON logging for the Wardrobe AI app.

Every record carries the correlation id of the user action that produced it
(adding an item, asking for an outfit, ...). Image payloads, coordinates and
free-text model output are scrubbed before they reach a handler.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord has; anything else on a record came in via ``extra``.
_RECORD_ATTRIBUTES = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime", "taskName"}

SENSITIVE_KEYS = frozenset(
    {
        "image",
        "image_url",
        "imageUrl",
        "image_payload",
        "data",
        "location",
        "latitude",
        "longitude",
        "description",
        "reasoning",
    }
)
_INLINE_IMAGE = re.compile(r"^data:[^,]*,")
MAX_LOGGED_STRING = 256


class JsonFormatter(logging.Formatter):
    """One JSON object per line: level, logger, event, correlation id and extras."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        }
        payload.update(redact_for_log(extras))
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Send all logging to stderr as JSON. ``LOG_LEVEL`` overrides the default."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(
        level=level or os.getenv("LOG_LEVEL", "INFO"),
        handlers=[handler],
        force=True,
    )


def redact_for_log(payload: Any) -> Any:
    """Recursively scrub image payloads, location details and model prose."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(value) for value in payload]

    text = payload if isinstance(payload, str) else str(payload)
    if _INLINE_IMAGE.match(text):
        return "[redacted-image]"
    if len(text) > MAX_LOGGED_STRING:
        return f"{text[:MAX_LOGGED_STRING]}...[truncated]"
    return text


def get_logger(name: str) -> logging.Logger:
    """Module logger; installs JSON logging on first use if nothing else did."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Bind ``correlation_id`` (or a fresh one if none is bound yet) and return it."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current is None:
        current = uuid.uuid4().hex
        CORRELATION_ID.set(current)
    return current


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block."""

    scoped_id = correlation_id or uuid.uuid4().hex
    token = CORRELATION_ID.set(scoped_id)
    try:
        yield scoped_id
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted structured fields."""

    correlation_id = fields.pop("correlation_id", None) or CORRELATION_ID.get()
    exc_info = fields.pop("exc_info", None)
    extra = {"event": event, "correlation_id": correlation_id}
    extra.update(redact_for_log(fields))
    logger.log(level, event, exc_info=exc_info, extra=extra)


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Scope one user-initiated operation.

    Nested operations inherit the outer id so a whole action can be traced.
    """

    with correlation_context(correlation_id or CORRELATION_ID.get()) as scoped_id:
        log_event(logging.getLogger("wardrobe_app.operations"), logging.DEBUG, "operation_started", operation=name)
        yield scoped_id


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
