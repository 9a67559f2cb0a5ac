"""Logging setup with text and JSON output modes."""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import Any

from app.core.config import settings

_RESERVED_RECORD_KEYS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    },
)
_SENSITIVE_KEYS = frozenset({"authorization", "password", "secret", "token"})
_HANDLER_NAME = "app.root"


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    extras: dict[str, Any] = {}
    for key, value in record.__dict__.items():
        if key in _RESERVED_RECORD_KEYS or key.startswith("_"):
            continue
        if key.lower() in _SENSITIVE_KEYS:
            continue
        extras[key] = value
    return extras


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_record_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class KeyValueFormatter(logging.Formatter):
    """Human-readable formatter that appends `extra=` context as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        extras = _record_extras(record)
        if not extras:
            return base
        context = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return f"{base} {context}"


def _build_formatter() -> logging.Formatter:
    if settings.log_format.strip().lower() == "json":
        return JsonFormatter()
    formatter = KeyValueFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    if settings.log_use_utc:
        formatter.converter = time.gmtime
    return formatter


def configure_logging() -> None:
    """Install the application log handler on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setFormatter(_build_formatter())
            return
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(_build_formatter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a named application logger."""
    return logging.getLogger(name)
