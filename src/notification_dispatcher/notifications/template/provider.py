"""In-memory template provider (the default template source)."""

from __future__ import annotations

from ..delivery import NotificationChannel
from ..ports.renderer import NotificationTemplate


class InMemoryTemplateProvider:
    """Dictionary-backed provider; implements ``ITemplateProvider``."""

    def __init__(self) -> None:
        self._templates: dict[tuple[str, NotificationChannel], NotificationTemplate] = {}

    async def load(
        self,
        event_type: str,
        channel: NotificationChannel,
    ) -> NotificationTemplate | None:
        """Load template from memory."""
        return self._templates.get((event_type, channel))

    def add(self, template: NotificationTemplate) -> None:
        """Store template; an existing entry with the same key is replaced."""
        self._templates[template.key] = template

    def __len__(self) -> int:
        return len(self._templates)
