"""Logging setup: JSON log entries carrying the current trace context."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from .correlation import get_context_vars

_CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(trace_id)s] %(message)s"


class TraceContextFilter(logging.Filter):
    """Attaches trace_id, span_id and correlation_id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_context_vars().items():
            if not hasattr(record, key):
                setattr(record, key, value or "-")
        return True


class JsonFormatter(logging.Formatter):
    """Emits one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "trace_id": getattr(record, "trace_id", None),
            "span_id": getattr(record, "span_id", None),
            "correlation_id": getattr(record, "correlation_id", None),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install a single stderr handler on the root logger."""
    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(TraceContextFilter())
    if fmt.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
