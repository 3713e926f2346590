"""
Structured JSON logging configuration.

All records from the ``dials.*`` loggers are emitted as single-line JSON
objects to stderr.

Usage::

    import logging

    logger = logging.getLogger("dials.extractor")
    logger.warning("document unavailable", extra={"source_url": url, "reason": why})
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER = "dials"

_EXTRA_FIELDS = ("source_url", "status", "duration_ms", "reason", "model")


class JSONFormatter(logging.Formatter):
    """Emits each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a JSON stderr handler to the ``dials`` logger tree.

    Calling this more than once only updates the level.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())

    if not any(getattr(h, "_dials_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        handler._dials_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
