"""Template registry: exact ``(event_type, channel)`` lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...exceptions import ConfigurationError
from ..delivery import NotificationChannel
from .catalog import DEFAULT_TEMPLATES
from .provider import InMemoryTemplateProvider

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..ports.provider import ITemplateProvider
    from ..ports.renderer import NotificationTemplate

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """
    Resolves templates by exact key; no prefix or wildcard matching.

    A miss, or an inactive template, resolves to ``None`` and the caller
    falls back to a basic notification.
    """

    def __init__(self, provider: ITemplateProvider | None = None) -> None:
        self._provider: ITemplateProvider = provider or InMemoryTemplateProvider()

    @classmethod
    def from_catalog(
        cls,
        templates: Iterable[NotificationTemplate] = DEFAULT_TEMPLATES,
    ) -> TemplateRegistry:
        """Build a registry backed by memory and populated from *templates*."""
        provider = InMemoryTemplateProvider()
        registry = cls(provider)
        for template in templates:
            registry.register(template)
        logger.info(f"Loaded {len(provider)} templates")
        return registry

    def register(self, template: NotificationTemplate) -> None:
        """Register a template; the last registration for a key wins."""
        if not isinstance(self._provider, InMemoryTemplateProvider):
            raise ConfigurationError(
                "Templates can only be registered on an in-memory provider"
            )
        self._provider.add(template)

    async def resolve(
        self,
        event_type: str,
        channel: NotificationChannel = NotificationChannel.EMAIL,
    ) -> NotificationTemplate | None:
        """Return the active template for the key, or None."""
        template = await self._provider.load(event_type, channel)
        if template is None:
            logger.debug(f"No template found for {event_type} ({channel.value})")
            return None
        if not template.active:
            logger.debug(f"Template {template.name!r} is inactive")
            return None
        return template
