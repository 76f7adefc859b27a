"""SMTP email implementation."""

from __future__ import annotations

import email.message
import email.policy
import logging
from email.utils import formataddr
from typing import Any

import aiosmtplib

from ...exceptions import NotificationDeliveryError
from ..delivery import DeliveryRecord, NotificationChannel, RenderedNotification
from .html import render_email_html

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """
    Async SMTP email sender using aiosmtplib.

    Sends multipart/alternative messages: the plain-text body plus an HTML
    rendering of it (see ``render_email_html``) unless the content already
    carries HTML. Credentials are optional so local catch-all servers
    (Mailpit, MailHog) work without auth.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = False,
        timeout: float = 10.0,
        from_email: str | None = None,
        from_name: str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.from_email = from_email
        self.from_name = from_name
        if not (username and password):
            logger.warning("SMTP credentials not configured; using anonymous SMTP")

    def is_configured(self) -> bool:
        return bool(self.host and self.from_email)

    def build_message(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, Any] | None = None,
    ) -> email.message.EmailMessage:
        """Build the MIME message for *content*."""
        metadata = metadata or {}
        from_addr = str(metadata.get("from_email") or self.from_email or "")
        if not from_addr:
            raise NotificationDeliveryError(
                NotificationChannel.EMAIL.value, recipient, "sender address is required"
            )

        message = email.message.EmailMessage(policy=email.policy.default)
        message["To"] = recipient
        message["From"] = formataddr((self.from_name or "", from_addr))
        message["Subject"] = content.subject or "Notification"

        event_type = metadata.get("event_type")
        body_html = content.body_html or render_email_html(
            content.body, str(event_type) if event_type else None
        )
        message.set_content(content.body, subtype="plain", charset="utf-8")
        message.add_alternative(body_html, subtype="html", charset="utf-8")
        return message

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, Any] | None = None,
    ) -> DeliveryRecord:
        channel = NotificationChannel.EMAIL
        try:
            message = self.build_message(recipient, content, metadata)
            async with aiosmtplib.SMTP(
                hostname=self.host,
                port=self.port,
                timeout=self.timeout,
                start_tls=False,
            ) as smtp:
                if self.use_tls:
                    await smtp.starttls()
                if self.username and self.password:
                    await smtp.login(self.username, self.password)
                await smtp.send_message(message)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to send email to {recipient}: {e}")
            return DeliveryRecord.failed(recipient, channel, error=str(e))

        logger.info(f"Email sent to {recipient} via SMTP")
        return DeliveryRecord.sent(recipient, channel, provider_id="smtp")
