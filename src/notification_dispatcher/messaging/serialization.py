"""EnvelopeSerializer: JSON encoding for outbound envelopes and inbound bodies."""

from __future__ import annotations

import json
from typing import Any

from ..exceptions import MessagingSerializationError
from .envelope import MessageEnvelope


def _json_serializer(obj: Any) -> Any:
    """Serialize datetime and other non-JSON types."""
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class EnvelopeSerializer:
    """Serialize MessageEnvelope to JSON bytes and decode inbound message bodies.

    Inbound bodies are returned as plain dicts: producers disagree on shape,
    so normalization happens later in the pipeline.
    """

    def serialize(self, envelope: MessageEnvelope) -> bytes:
        """Encode envelope to JSON bytes."""
        try:
            return json.dumps(envelope.to_wire(), default=_json_serializer).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise MessagingSerializationError(str(e)) from e

    def deserialize(self, raw: bytes | str) -> dict[str, Any]:
        """Decode a JSON object body."""
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
            data = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MessagingSerializationError(str(e)) from e
        if not isinstance(data, dict):
            raise MessagingSerializationError(
                f"Expected a JSON object, got {type(data).__name__}"
            )
        return data
