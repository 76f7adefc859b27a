"""Trace and correlation context: propagated across async boundaries via contextvars."""

from __future__ import annotations

import contextlib
import uuid
from collections.abc import Iterator
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)
_span_id: ContextVar[str | None] = ContextVar("span_id", default=None)

_EMPTY_SPAN_ID = "0" * 16


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set correlation ID in context."""
    _correlation_id.set(correlation_id)


def get_trace_id() -> str | None:
    """Get current W3C trace ID from context."""
    return _trace_id.get()


def get_span_id() -> str | None:
    """Get current W3C span ID from context."""
    return _span_id.get()


def generate_trace_id() -> str:
    """Generate a new 32-hex-digit trace ID."""
    return uuid.uuid4().hex


def get_context_vars() -> dict[str, str | None]:
    """Get all trace context variables (used by the log formatter)."""
    return {
        "correlation_id": get_correlation_id(),
        "trace_id": get_trace_id(),
        "span_id": get_span_id(),
    }


@contextlib.contextmanager
def trace_context(trace_id: str | None, span_id: str | None = None) -> Iterator[None]:
    """Bind trace/span (and correlation) IDs for the duration of the block."""
    tokens = (
        _trace_id.set(trace_id),
        _span_id.set(span_id),
        _correlation_id.set(trace_id),
    )
    try:
        yield
    finally:
        _correlation_id.reset(tokens[2])
        _span_id.reset(tokens[1])
        _trace_id.reset(tokens[0])


def parse_traceparent(traceparent: str) -> tuple[str | None, str | None]:
    """Split a ``traceparent`` header into ``(trace_id, span_id)``.

    ``00-<trace>-<span>-01`` yields the second and third segments. A value
    without dashes is treated as a bare trace ID. An empty trace segment
    yields ``(None, None)`` so callers fall back to their own trace ID.
    """
    if "-" not in traceparent:
        return traceparent, None
    parts = traceparent.split("-")
    trace_id = parts[1].strip()
    if not trace_id:
        return None, None
    span_id = parts[2] if len(parts) > 2 and parts[2] else None
    return trace_id, span_id


def build_traceparent(trace_id: str, span_id: str | None = None) -> str:
    """Build a version-00, sampled ``traceparent`` header."""
    return f"00-{trace_id}-{span_id or _EMPTY_SPAN_ID}-01"
