"""InMemoryProvider: messaging provider with assertion helpers for tests and local runs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..envelope import MessageEnvelope, build_envelope
from .bus import InMemoryMessageBus

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence

logger = logging.getLogger(__name__)


class InMemoryProvider:
    """In-memory provider that buffers envelopes and dispatches to subscribers.

    ``fail_publish`` makes every publish report ``False`` so callers' handling
    of an unavailable transport can be exercised.
    """

    def __init__(
        self,
        bus: InMemoryMessageBus | None = None,
        *,
        source: str = "notification-service",
        fail_publish: bool = False,
    ) -> None:
        """If bus is None, a new private bus is created."""
        self._bus = bus or InMemoryMessageBus()
        self._source = source
        self.fail_publish = fail_publish
        self.closed = False

    async def publish(
        self,
        topic: str,
        data: dict[str, Any],
        correlation_id: str | None = None,
    ) -> bool:
        """Publish to the in-memory bus (and trigger any subscribed handlers)."""
        if self.fail_publish:
            logger.error(f"In-memory publish to {topic} rejected (fail_publish set)")
            return False
        try:
            envelope = build_envelope(topic, self._source, data, correlation_id)
            await self._bus.publish(topic, envelope)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to publish event to {topic} in memory: {e}")
            return False
        return True

    async def subscribe(
        self,
        topics: Sequence[str],
        handler: Callable[[dict[str, Any]], Coroutine[Any, Any, None]],
    ) -> None:
        """Register handler for every topic."""
        for topic in topics:
            self._bus.register(topic, handler)

    async def close(self) -> None:
        self.closed = True

    def get_published(self) -> list[tuple[str, MessageEnvelope]]:
        """Return all (topic, envelope) published so far."""
        return self._bus.get_published()

    def assert_published(self, topic: str, count: int = 1) -> None:
        """Assert that exactly `count` envelopes were published to `topic`."""
        published = self.get_published()
        matching = [e for t, e in published if t == topic]
        assert len(matching) == count, (
            f"Expected {count} message(s) on topic={topic!r}, "
            f"got {len(matching)}. Published: {[t for t, _ in published]}"
        )

    @property
    def bus(self) -> InMemoryMessageBus:
        """Return the bus (e.g. to share with another provider)."""
        return self._bus
