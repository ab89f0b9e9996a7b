"""Logging setup for command-line execution."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_text

# Attributes passed through ``extra=`` that are copied into the JSON event.
CONTEXT_FIELDS = ("provider", "status_code")


class JsonConsoleFormatter(logging.Formatter):
    """JSON formatter for console logs; every text field is redacted."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                event[field] = value
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def _console_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if isinstance(handler.formatter, JsonConsoleFormatter):
            return handler
    return None


def setup_logger(name: str = "weather_fetch", level: int | str = logging.WARNING) -> logging.Logger:
    """Configure the process-wide logger; safe to call again to change the level.

    Only one JSON console handler is ever attached. Handlers installed by
    other code (log capture in tests, for example) are left alone.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    if _console_handler(logger) is None:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)
    return logger
