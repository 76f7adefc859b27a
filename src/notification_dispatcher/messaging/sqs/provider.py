"""SQSProvider: managed-bus publishing with one cached sender per topic."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING, Any

from ..envelope import MessageEnvelope, build_envelope
from ..serialization import EnvelopeSerializer

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .connection import SQSConnectionManager

logger = logging.getLogger(__name__)

_FIFO_SUFFIX = ".fifo"
_INVALID_QUEUE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def queue_name_for(topic: str) -> str:
    """Derive a valid SQS queue name from *topic*.

    Queue names allow only alphanumerics, hyphens and underscores (plus a
    ``.fifo`` suffix), so ``notification.sent`` maps to ``notification-sent``.
    """
    base, suffix = topic, ""
    if topic.endswith(_FIFO_SUFFIX):
        base, suffix = topic[: -len(_FIFO_SUFFIX)], _FIFO_SUFFIX
    return _INVALID_QUEUE_CHARS.sub("-", base) + suffix


def _string_attribute(value: str) -> dict[str, str]:
    return {"DataType": "String", "StringValue": value}


class QueueSender:
    """Sends to one resolved queue URL on behalf of one topic."""

    def __init__(self, client: Any, topic: str, queue_url: str) -> None:
        self._client = client
        self.topic = topic
        self.queue_url = queue_url
        self.closed = False

    @property
    def is_fifo(self) -> bool:
        return self.queue_url.endswith(".fifo")

    async def send(self, envelope: MessageEnvelope, body: bytes) -> None:
        """Send the serialized envelope with its routing attributes."""
        attributes = {
            "eventType": _string_attribute(envelope.type),
            "source": _string_attribute(envelope.source),
        }
        if envelope.correlation_id:
            attributes["correlationId"] = _string_attribute(envelope.correlation_id)
        send_kwargs: dict[str, Any] = {
            "QueueUrl": self.queue_url,
            "MessageBody": body.decode("utf-8"),
            "MessageAttributes": attributes,
        }
        if self.is_fifo:
            send_kwargs["MessageDeduplicationId"] = envelope.id
            send_kwargs["MessageGroupId"] = envelope.correlation_id or envelope.type
        await self._client.send_message(**send_kwargs)

    async def close(self) -> None:
        self.closed = True


class SQSProvider:
    """Managed-bus messaging provider.

    Each topic maps to one queue: an explicit entry in ``queue_names`` or
    ``queue_name_for(topic)``. Queue URLs are resolved once per topic and the
    resulting ``QueueSender`` is cached under the topic for the provider's
    lifetime.
    """

    def __init__(
        self,
        connection: SQSConnectionManager,
        *,
        source: str,
        queue_names: Mapping[str, str] | None = None,
        serializer: EnvelopeSerializer | None = None,
    ) -> None:
        """Configure provider.

        Args:
            connection: Shared connection manager.
            source: Service identity (CloudEvent source attribute).
            queue_names: Topic to queue name overrides.
            serializer: Envelope serializer; default EnvelopeSerializer().
        """
        self._connection = connection
        self._source = source
        self._queue_names = dict(queue_names or {})
        self._serializer = serializer or EnvelopeSerializer()
        self._senders: dict[str, QueueSender] = {}
        self._lock = asyncio.Lock()

    @property
    def senders(self) -> dict[str, QueueSender]:
        """Cached senders by topic (a copy)."""
        return dict(self._senders)

    async def _get_sender(self, topic: str) -> QueueSender:
        sender = self._senders.get(topic)
        if sender is not None:
            return sender
        async with self._lock:
            sender = self._senders.get(topic)
            if sender is None:
                client = await self._connection.get_client()
                queue_name = self._queue_names.get(topic) or queue_name_for(topic)
                queue_url = await self._connection.get_queue_url(queue_name)
                sender = QueueSender(client, topic, queue_url)
                self._senders[topic] = sender
                logger.debug(f"Created SQS sender for {topic} ({queue_url})")
        return sender

    async def publish(
        self,
        topic: str,
        data: dict[str, Any],
        correlation_id: str | None = None,
    ) -> bool:
        """Publish to the queue named by *topic*."""
        try:
            envelope = build_envelope(topic, self._source, data, correlation_id)
            body = self._serializer.serialize(envelope)
            sender = await self._get_sender(topic)
            await sender.send(envelope, body)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to publish event to {topic} via SQS: {e}")
            return False

        logger.info(f"Event published to {topic} via SQS (correlation_id={correlation_id})")
        return True

    async def close(self) -> None:
        """Dispose every cached sender, then the client."""
        async with self._lock:
            senders = list(self._senders.values())
            self._senders.clear()
        for sender in senders:
            await sender.close()
        await self._connection.close()
        logger.info(f"SQS messaging provider closed ({len(senders)} sender(s))")
