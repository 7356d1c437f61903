"""One-line JSON log records for weather lookups, readable with Chinese place names."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any


class JsonConsoleFormatter(logging.Formatter):
    """Render each record as a JSON object with ts, level, logger and message keys."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        # Place names are usually non-ASCII; keep them readable in the console.
        return json.dumps(event, default=str, ensure_ascii=False)


def setup_logger(name: str = "meteo_desk", level: int | str = logging.INFO) -> logging.Logger:
    """Return the `name` logger with a single JSON stderr handler attached."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger
