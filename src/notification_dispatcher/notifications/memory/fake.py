"""In-memory email sender for test assertions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..delivery import DeliveryRecord, NotificationChannel, RenderedNotification


@dataclass
class SentMessage:
    """Record of a sent message for test assertions."""

    recipient: str
    content: RenderedNotification
    metadata: dict[str, Any] | None


class InMemoryEmailSender:
    """
    Test double (Fake) that stores messages in a list for assertions.

    ``fail_with`` turns every send into a failed delivery record carrying that
    error; ``configured=False`` makes the sender report itself as not ready.
    """

    def __init__(self, *, fail_with: str | None = None, configured: bool = True) -> None:
        self.sent_messages: list[SentMessage] = []
        self.fail_with = fail_with
        self.configured = configured

    def is_configured(self) -> bool:
        return self.configured

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, Any] | None = None,
    ) -> DeliveryRecord:
        if self.fail_with is not None:
            return DeliveryRecord.failed(recipient, NotificationChannel.EMAIL, error=self.fail_with)
        self.sent_messages.append(SentMessage(recipient, content, metadata))
        return DeliveryRecord.sent(recipient, NotificationChannel.EMAIL, provider_id="test-id")

    def assert_sent(self, recipient: str, count: int = 1) -> None:
        """Helper for test assertions."""
        matches = [m for m in self.sent_messages if m.recipient == recipient]
        if len(matches) != count:
            raise AssertionError(
                f"Expected {count} messages to {recipient}, but found {len(matches)}."
            )

    def clear(self) -> None:
        """Clear all sent messages."""
        self.sent_messages.clear()
