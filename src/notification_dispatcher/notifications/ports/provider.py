"""Template provider port for external sources."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..delivery import NotificationChannel
from .renderer import NotificationTemplate


@runtime_checkable
class ITemplateProvider(Protocol):
    """
    Protocol for loading templates.

    The in-memory provider is the default; a database- or file-backed
    provider can be swapped in without changing ``TemplateRegistry.resolve``.
    """

    async def load(
        self,
        event_type: str,
        channel: NotificationChannel,
    ) -> NotificationTemplate | None:
        """Load template by event type and channel."""
        ...
