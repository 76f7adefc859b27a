"""EmailDispatcher: the delivery boundary the orchestrator talks to."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .delivery import RenderedNotification
from .sanitization import MetadataSanitizer, default_sanitizer

if TYPE_CHECKING:
    from .ports.sender import IEmailSender

logger = logging.getLogger(__name__)

NO_RECIPIENT = "No recipient email address"
DELIVERY_DISABLED = "Email delivery disabled"
SEND_FAILED = "Email sending failed"


class EmailDispatcher:
    """
    Wraps an ``IEmailSender`` and reduces every outcome to a boolean.

    ``send`` never raises for delivery problems: adapter exceptions and failed
    delivery records are logged and returned as ``False``.

    Args:
        sender: The channel adapter (SMTP, console, in-memory).
        enabled: Administrative switch (``EMAIL_ENABLED``).
        sanitizer: Strips credentials from metadata before the adapter sees it.
    """

    def __init__(
        self,
        sender: IEmailSender,
        *,
        enabled: bool = True,
        sanitizer: MetadataSanitizer | None = None,
    ) -> None:
        self._sender = sender
        self._enabled = enabled
        self._sanitizer = sanitizer or default_sanitizer
        if not enabled:
            logger.info("Email delivery is disabled via configuration")
        elif not sender.is_configured():
            logger.warning("Email delivery is enabled but the sender is not configured")

    @property
    def enabled(self) -> bool:
        """True when switched on and the adapter is ready."""
        return self._enabled and self._sender.is_configured()

    async def send(
        self,
        recipient_email: str,
        subject: str,
        body: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        if not self.enabled:
            logger.debug("Email sending skipped (delivery disabled)")
            return False

        content = RenderedNotification(subject=subject, body=body)
        safe_metadata = self._sanitizer.sanitize(metadata or {})
        try:
            record = await self._sender.send(recipient_email, content, safe_metadata)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Email sender raised while sending to {recipient_email}: {e}")
            return False

        if not record.succeeded:
            logger.error(f"Email delivery to {recipient_email} failed: {record.error}")
            return False
        return True
