"""JSON logging with trace context."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from notification_dispatcher.correlation import trace_context
from notification_dispatcher.log_config import (
    JsonFormatter,
    TraceContextFilter,
    configure_logging,
)


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("svc", logging.INFO, __file__, 1, message, None, None)


def test_json_entry_carries_trace_context() -> None:
    record = _record()
    with trace_context("trace-1", "span-1"):
        TraceContextFilter().filter(record)

    entry = json.loads(JsonFormatter().format(record))
    assert entry["message"] == "hello"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "svc"
    assert entry["trace_id"] == "trace-1"
    assert entry["span_id"] == "span-1"
    assert entry["correlation_id"] == "trace-1"


def test_filter_uses_placeholder_outside_trace() -> None:
    record = _record()
    TraceContextFilter().filter(record)
    assert record.trace_id == "-"  # type: ignore[attr-defined]


def test_exception_is_serialized() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "svc", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )
    entry = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: boom" in entry["exception"]


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_installs_single_handler() -> None:
    configure_logging("debug", "console")
    configure_logging("warning", "json")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert root.level == logging.WARNING
