"""MessageEnvelope: CloudEvents 1.0 wrapper applied before handing data to a transport."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CLOUDEVENTS_SPEC_VERSION = "1.0"


class MessageEnvelope(BaseModel):
    """Immutable CloudEvents-compliant envelope for outbound messages.

    Attribute names on the wire follow CloudEvents (``specversion``,
    ``datacontenttype``) plus a ``correlationId`` extension.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    specversion: str = CLOUDEVENTS_SPEC_VERSION
    type: str = Field(..., description="Topic / event type, e.g. 'notification.sent'")
    source: str = Field(..., description="Publishing service identity")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    datacontenttype: str = "application/json"
    data: dict[str, Any] = Field(default_factory=dict)
    correlation_id: str | None = Field(default=None, alias="correlationId")

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready dict, dropping an unset correlationId."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def build_envelope(
    topic: str,
    source: str,
    data: dict[str, Any],
    correlation_id: str | None = None,
) -> MessageEnvelope:
    """Wrap *data* for *topic*.

    The envelope ``id`` doubles as the idempotency key: it is the correlation ID
    when one is given, otherwise a fresh UUID.
    """
    return MessageEnvelope(
        type=topic,
        source=source,
        id=correlation_id or str(uuid.uuid4()),
        data=data,
        correlation_id=correlation_id,
    )
