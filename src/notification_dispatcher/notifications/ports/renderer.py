"""Template definition and renderer port."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from ..delivery import NotificationChannel, RenderedNotification


@dataclass(frozen=True)
class NotificationTemplate:
    """Immutable template definition keyed by ``(event_type, channel)``."""

    event_type: str
    channel: NotificationChannel
    name: str
    body_template: str
    subject_template: str | None = None
    active: bool = True

    @property
    def key(self) -> tuple[str, NotificationChannel]:
        return (self.event_type, self.channel)


@runtime_checkable
class ITemplateRenderer(Protocol):
    """Protocol for rendering notification templates."""

    def render(
        self,
        template: NotificationTemplate,
        variables: dict[str, Any],
    ) -> RenderedNotification:
        """Render template with variables."""
        ...
