"""Envelope normalization across the payload shapes producers actually send.

Three shapes are accepted:

* a CloudEvent wrapper whose ``data`` carries the event fields;
* the legacy double nesting, where ``data.data`` holds the user fields
  (``email``, ``userId`` or ``firstName``) and is unwrapped one more level;
* a flat payload with the event fields at the top level.

Anything that is not a mapping is treated as an empty flat payload.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..correlation import generate_trace_id, parse_traceparent

logger = logging.getLogger(__name__)

_LEGACY_MARKERS = ("email", "userId", "firstName")

# Envelope bookkeeping, not user data.
_SCAFFOLDING_KEYS = frozenset(
    {
        "eventId",
        "eventType",
        "userId",
        "userEmail",
        "userPhone",
        "timestamp",
        "traceparent",
        "headers",
        "specversion",
        "type",
        "source",
        "id",
        "time",
        "datacontenttype",
        "correlationId",
        "attempt",
        "deliveryCount",
    }
)


class EventEnvelope(BaseModel):
    """Canonical inbound event after normalization."""

    model_config = ConfigDict(frozen=True)

    event_type: str
    user_id: str | None = None
    user_email: str | None = None
    user_phone: str | None = None
    timestamp: str | None = None
    trace_id: str
    span_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    extras: dict[str, Any] = Field(default_factory=dict)
    attempt_number: int = 1


@dataclass(frozen=True)
class SkipSignal:
    """Returned instead of an envelope when the event cannot be processed at all."""

    reason: str


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str | None:
    """Stringify scalars; blank strings and non-scalars count as absent."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _first(*values: Any) -> str | None:
    for value in values:
        text = _text(value)
        if text is not None:
            return text
    return None


def _lookup(key: str, *layers: Mapping[str, Any]) -> str | None:
    return _first(*(layer.get(key) for layer in layers))


def _is_legacy(inner: Mapping[str, Any]) -> bool:
    return any(inner.get(marker) for marker in _LEGACY_MARKERS)


def _is_cloudevent_wrapper(root: Mapping[str, Any], data: Mapping[str, Any]) -> bool:
    if "specversion" in root:
        return True
    return "eventType" not in root and "eventType" in data


def _split_layers(root: Mapping[str, Any]) -> tuple[Mapping[str, Any], list[Mapping[str, Any]]]:
    """Return the mapping that holds the event fields plus its enclosing layers.

    Enclosing layers, innermost first, are consulted as fallbacks for fields the
    payload itself does not carry.
    """
    outer = root.get("data")
    if outer is not None and not isinstance(outer, Mapping):
        return {}, []
    if not isinstance(outer, Mapping):
        return root, []

    inner = outer.get("data")
    if isinstance(inner, Mapping) and _is_legacy(inner):
        return inner, [outer, root]
    if _is_cloudevent_wrapper(root, outer):
        return outer, [root]
    return root, []


def _extract_trace(root: Mapping[str, Any]) -> tuple[str, str | None]:
    traceparent = _first(
        root.get("traceparent"),
        _as_mapping(root.get("data")).get("traceparent"),
        _as_mapping(root.get("headers")).get("traceparent"),
    )
    if traceparent is not None:
        trace_id, span_id = parse_traceparent(traceparent)
        if trace_id:
            return trace_id, span_id
    return _text(root.get("id")) or generate_trace_id(), None


def _attempt_number(root: Mapping[str, Any]) -> int:
    """1-based delivery attempt from redelivery metadata, defaulting to 1."""
    for key in ("attempt", "deliveryCount"):
        value = root.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
            return value
    return 1


def normalize(raw_payload: Any, declared_topic: str | None) -> EventEnvelope | SkipSignal:
    """Extract the canonical envelope from *raw_payload*.

    Args:
        raw_payload: The decoded inbound body, in any of the supported shapes.
        declared_topic: Subscription topic the event arrived on; used as the
            event type when the payload does not carry one.

    Returns:
        The envelope, or a ``SkipSignal`` when no event type can be derived.
    """
    root = _as_mapping(raw_payload)
    payload, enclosing = _split_layers(root)
    nested = payload.get("data")
    data_layer = _as_mapping(nested)

    trace_id, span_id = _extract_trace(root)

    event_type = _first(
        payload.get("eventType"),
        *(layer.get("eventType") for layer in enclosing if layer is not root),
        declared_topic,
    )
    if event_type is None:
        reason = "Invalid event structure, missing eventType"
        logger.warning(f"{reason} (topic={declared_topic!r}, trace_id={trace_id})")
        return SkipSignal(reason=reason)

    user_id = _first(
        _lookup("userId", payload, *enclosing),
        _lookup("email", payload, data_layer),
        _lookup("username", payload, data_layer),
    )
    user_email = _first(
        _lookup("userEmail", payload, *enclosing),
        _lookup("email", payload, data_layer),
    )

    if isinstance(nested, Mapping):
        data = dict(nested)
    else:
        data = {k: v for k, v in payload.items() if k not in _SCAFFOLDING_KEYS}

    return EventEnvelope(
        event_type=event_type,
        user_id=user_id,
        user_email=user_email,
        user_phone=_lookup("userPhone", payload, *enclosing),
        timestamp=_first(payload.get("timestamp"), root.get("time")),
        trace_id=trace_id,
        span_id=span_id,
        data=data,
        extras={k: v for k, v in payload.items() if k != "data"},
        attempt_number=_attempt_number(root),
    )
