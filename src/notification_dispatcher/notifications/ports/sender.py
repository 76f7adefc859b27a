"""Email sender port."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..delivery import DeliveryRecord, RenderedNotification


@runtime_checkable
class IEmailSender(Protocol):
    """
    Channel adapter that hands a rendered email to a concrete transport
    (SMTP server, console, in-memory fake).
    """

    def is_configured(self) -> bool:
        """Return True when the adapter has what it needs to send."""
        ...

    async def send(
        self,
        recipient: str,
        content: RenderedNotification,
        metadata: dict[str, Any] | None = None,
    ) -> DeliveryRecord:
        """Send the email and return a delivery record.

        Adapters report ordinary transport failures through a failed record;
        the dispatcher also tolerates adapters that raise.
        """
        ...
