"""Structured console logging for the weather widget."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import IO, Any

from .redaction import sanitize_for_logging, sanitize_text

DEFAULT_LOGGER_NAME = "animated_weather"
# Attributes passed through `extra=` that end up in the JSON event.
CONTEXT_FIELDS = ("provider", "endpoint", "cycle_id", "status_code")


class JsonConsoleFormatter(logging.Formatter):
    """One JSON object per line, stamped with the record's creation time."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                event[field] = sanitize_for_logging(value)
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(
    level: int | str = logging.INFO,
    *,
    name: str = DEFAULT_LOGGER_NAME,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Configure the widget logger once; later calls only adjust the level."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)
    return logger
