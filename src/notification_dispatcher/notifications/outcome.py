"""Outcome events (``notification.sent`` / ``notification.failed``) and their publisher."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from ..correlation import build_traceparent
from .delivery import NotificationChannel

if TYPE_CHECKING:
    from ..messaging.ports import IMessagingProvider

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    """Outbound topic per delivery outcome."""

    SENT = "notification.sent"
    FAILED = "notification.failed"


class NotificationOutcome(BaseModel):
    """Audit record of one delivery attempt."""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    notification_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    original_event_type: str
    channel: NotificationChannel = NotificationChannel.EMAIL
    user_id: str | None = None
    recipient_email: str | None = None
    subject: str
    error_message: str | None = None
    attempt_number: int = 1
    trace_id: str
    span_id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_payload(self) -> dict[str, Any]:
        """Return the wire payload handed to the messaging provider."""
        data: dict[str, Any] = {
            "notificationId": self.notification_id,
            "originalEventType": self.original_event_type,
            "channel": self.channel.value,
            "recipientEmail": self.recipient_email,
            "subject": self.subject,
        }
        if self.kind is OutcomeKind.FAILED:
            data["errorMessage"] = self.error_message
        data["attemptNumber"] = self.attempt_number
        return {
            "eventType": self.kind.value,
            "userId": self.user_id,
            "userEmail": self.recipient_email,
            "timestamp": self.timestamp.isoformat(),
            "traceparent": build_traceparent(self.trace_id, self.span_id),
            "data": data,
        }


class OutcomePublisher:
    """
    Publishes outcome events through the messaging provider.

    Both methods publish exactly once and return whether the provider accepted
    the event. Failures are logged and never raised: the audit trail is
    best-effort and the delivery result stays authoritative.
    """

    def __init__(self, provider: IMessagingProvider) -> None:
        self._provider = provider

    async def publish_sent(
        self,
        *,
        notification_id: str,
        original_event_type: str,
        user_id: str | None,
        recipient_email: str,
        subject: str,
        trace_id: str,
        span_id: str | None = None,
        attempt_number: int = 1,
    ) -> bool:
        return await self.publish(
            NotificationOutcome(
                kind=OutcomeKind.SENT,
                notification_id=notification_id,
                original_event_type=original_event_type,
                user_id=user_id,
                recipient_email=recipient_email,
                subject=subject,
                attempt_number=attempt_number,
                trace_id=trace_id,
                span_id=span_id,
            )
        )

    async def publish_failed(
        self,
        *,
        notification_id: str,
        original_event_type: str,
        user_id: str | None,
        recipient_email: str | None,
        subject: str,
        error_message: str,
        trace_id: str,
        span_id: str | None = None,
        attempt_number: int = 1,
    ) -> bool:
        return await self.publish(
            NotificationOutcome(
                kind=OutcomeKind.FAILED,
                notification_id=notification_id,
                original_event_type=original_event_type,
                user_id=user_id,
                recipient_email=recipient_email,
                subject=subject,
                error_message=error_message,
                attempt_number=attempt_number,
                trace_id=trace_id,
                span_id=span_id,
            )
        )

    async def publish(self, outcome: NotificationOutcome) -> bool:
        """Publish a prepared outcome."""
        topic = outcome.kind.value
        logger.info(f"Publishing event: {topic} (notification_id={outcome.notification_id})")
        try:
            published = await self._provider.publish(
                topic, outcome.to_payload(), correlation_id=outcome.trace_id
            )
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to publish event {topic}: {e}")
            return False
        if not published:
            logger.warning(f"Outcome event {topic} was not accepted by the transport")
        return published
