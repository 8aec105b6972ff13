"""
Structured Logging

Configures the ``scannability`` logger to emit JSON lines (or plain
text for local use). Each entry carries timestamp, level, logger and
message, plus any whitelisted context passed through ``extra``.

Usage:
    from scannability.logging import get_logger
    logger = get_logger("cli")
    logger.info("Scored document", extra={"score": 72, "preset_id": "notion"})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Optional

from scannability.config import settings

EXTRA_FIELDS = (
    "preset_id", "score", "text_blocks", "fingerprint", "cache_hit",
    "duration_ms", "rule_id", "selector", "error",
)


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Configure the package logger. Call once at startup."""
    root = logging.getLogger("scannability")
    level = (level or settings.LOG_LEVEL).upper()
    root.setLevel(getattr(logging, level, logging.INFO))

    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if (fmt or settings.LOG_FORMAT) == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the scannability namespace."""
    return logging.getLogger(f"scannability.{name}")
