"""EventRouter: maps broker deliveries onto the orchestrator."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .subscriptions import SUBSCRIPTION_TOPICS

if TYPE_CHECKING:
    from .notifications.orchestrator import NotificationOrchestrator, ProcessingResult

logger = logging.getLogger(__name__)


class EventRouter:
    """
    Routes a consumed CloudEvent to the orchestrator by its ``type``.

    The CloudEvent type prefix (``com.xshopai.`` by default) is stripped so
    ``com.xshopai.order.placed`` routes as ``order.placed``. Events for topics
    outside the subscription list are logged and dropped. Orchestrator
    failures propagate so the transport redelivers.
    """

    def __init__(
        self,
        orchestrator: NotificationOrchestrator,
        *,
        topics: Iterable[str] = SUBSCRIPTION_TOPICS,
        type_prefix: str = "com.xshopai.",
    ) -> None:
        self._orchestrator = orchestrator
        self._topics = frozenset(topics)
        self._type_prefix = type_prefix

    def resolve_topic(self, event_type: str | None) -> str | None:
        if not event_type:
            return None
        if self._type_prefix and event_type.startswith(self._type_prefix):
            return event_type[len(self._type_prefix) :]
        return event_type

    async def route(self, event: dict[str, Any]) -> ProcessingResult | None:
        raw_type = event.get("type")
        topic = self.resolve_topic(raw_type if isinstance(raw_type, str) else None)
        if topic not in self._topics:
            logger.warning(
                f"No handler found for event type {raw_type!r} "
                f"(correlation_id={event.get('correlationId')})"
            )
            return None

        try:
            return await self._orchestrator.process(event, topic)
        except Exception as e:
            logger.error(f"Error routing event {topic}: {e}")
            raise
