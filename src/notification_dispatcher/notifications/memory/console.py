"""Console sender for local runs without an SMTP server."""

from __future__ import annotations

import logging
from typing import Any

from ..delivery import DeliveryRecord, NotificationChannel, RenderedNotification

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """Logs the email instead of sending it."""

    def is_configured(self) -> bool:
        return True

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, Any] | None = None,
    ) -> DeliveryRecord:
        output = [
            "=" * 50,
            "EMAIL NOTIFICATION",
            f"To:      {recipient}",
            f"Subject: {content.subject or '(No Subject)'}",
            f"Body:    {content.body}",
        ]
        if metadata:
            output.append(f"Meta:    {metadata}")
        output.append("=" * 50)
        logger.info("\n".join(output))
        return DeliveryRecord.sent(recipient, NotificationChannel.EMAIL, provider_id="console")
