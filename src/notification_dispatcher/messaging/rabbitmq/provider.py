"""RabbitMQProvider: direct broker publish and subscribe over a durable topic exchange."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aio_pika
from aio_pika.exceptions import AMQPConnectionError, ChannelInvalidStateError

from ...exceptions import MessagingConnectionError, MessagingSerializationError
from ..envelope import build_envelope
from ..serialization import EnvelopeSerializer

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence

    from aio_pika.abc import AbstractChannel, AbstractExchange, AbstractIncomingMessage

    from .connection import RabbitMQConnectionManager

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (
    AMQPConnectionError,
    ChannelInvalidStateError,
    ConnectionError,
    MessagingConnectionError,
)


def _delivery_attempt(message: AbstractIncomingMessage) -> int | None:
    """1-based attempt from the quorum-queue delivery counter, when the broker sets it."""
    count = (message.headers or {}).get("x-delivery-count")
    if isinstance(count, int):
        return count + 1
    return None


class RabbitMQProvider:
    """RabbitMQ messaging provider.

    Publishes persistent messages to a durable topic exchange with the topic as
    routing key. ``subscribe`` binds one durable queue per service to every
    topic of interest and processes one message at a time (prefetch 1).
    """

    def __init__(
        self,
        connection: RabbitMQConnectionManager,
        *,
        source: str,
        exchange_name: str = "xshopai.events",
        queue_name: str | None = None,
        serializer: EnvelopeSerializer | None = None,
    ) -> None:
        """Configure provider.

        Args:
            connection: Shared connection manager.
            source: Service identity (CloudEvent source and AMQP app_id).
            exchange_name: Durable topic exchange to publish to and bind from.
            queue_name: Consumer queue; defaults to ``{source}.events``.
            serializer: Envelope serializer; default EnvelopeSerializer().
        """
        self._connection = connection
        self._source = source
        self._exchange_name = exchange_name
        self._queue_name = queue_name or f"{source}.events"
        self._serializer = serializer or EnvelopeSerializer()
        self._exchange: AbstractExchange | None = None
        self._exchange_channel: AbstractChannel | None = None

    async def _ensure_exchange(self) -> AbstractExchange:
        """Declare the topic exchange once per channel."""
        channel = await self._connection.get_channel()
        if self._exchange is not None and self._exchange_channel is channel:
            return self._exchange
        self._exchange = await channel.declare_exchange(
            self._exchange_name,
            aio_pika.ExchangeType.TOPIC,
            durable=True,
        )
        self._exchange_channel = channel
        return self._exchange

    async def publish(
        self,
        topic: str,
        data: dict[str, Any],
        correlation_id: str | None = None,
    ) -> bool:
        """Publish to the exchange with *topic* as routing key."""
        try:
            envelope = build_envelope(topic, self._source, data, correlation_id)
            body = self._serializer.serialize(envelope)
            exchange = await self._ensure_exchange()
            await exchange.publish(
                aio_pika.Message(
                    body=body,
                    content_type="application/json",
                    delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
                    correlation_id=correlation_id,
                    message_id=envelope.id,
                    timestamp=envelope.time,
                    app_id=self._source,
                    type=topic,
                ),
                routing_key=topic,
            )
        except _CONNECTION_ERRORS as e:
            # The robust connection restores itself; keep it and its consumers.
            logger.error(f"RabbitMQ connection error while publishing to {topic}: {e}")
            return False
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to publish event to {topic} via RabbitMQ: {e}")
            return False

        logger.info(
            f"Event published to {topic} via RabbitMQ (correlation_id={correlation_id})"
        )
        return True

    async def subscribe(
        self,
        topics: Sequence[str],
        handler: Callable[[dict[str, Any]], Coroutine[Any, Any, None]],
    ) -> None:
        """Bind the service queue to *topics* and start consuming."""
        channel = await self._connection.get_channel()
        await channel.set_qos(prefetch_count=1)
        exchange = await self._ensure_exchange()
        queue = await channel.declare_queue(
            self._queue_name,
            durable=True,
            auto_delete=False,
        )
        for topic in topics:
            await queue.bind(exchange, routing_key=topic)

        async def on_message(raw: AbstractIncomingMessage) -> None:
            try:
                event = self._serializer.deserialize(raw.body)
            except MessagingSerializationError as e:
                # Redelivery cannot fix an undecodable body.
                logger.error(f"Rejecting undecodable message on {raw.routing_key}: {e}")
                await raw.reject(requeue=False)
                return

            if raw.routing_key:
                event["type"] = raw.routing_key
            attempt = _delivery_attempt(raw)
            if attempt is not None:
                event.setdefault("attempt", attempt)

            try:
                await handler(event)
            except Exception:  # noqa: BLE001
                logger.exception(
                    f"Handler failed for {raw.routing_key}; requeueing message"
                )
                await raw.nack(requeue=True)
                return
            await raw.ack()

        await queue.consume(on_message)
        logger.info(
            f"Consuming {len(topics)} topic(s) from queue {self._queue_name} "
            f"on exchange {self._exchange_name}"
        )

    async def close(self) -> None:
        self._exchange = None
        self._exchange_channel = None
        await self._connection.close()
        logger.info("RabbitMQ messaging provider closed")
