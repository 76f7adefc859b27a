"""DaprProvider: publishes through the Dapr sidecar's HTTP pub/sub API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..envelope import build_envelope
from ..serialization import EnvelopeSerializer

logger = logging.getLogger(__name__)

CLOUDEVENTS_CONTENT_TYPE = "application/cloudevents+json"


class DaprProvider:
    """
    Sidecar pub/sub provider.

    The CloudEvent is posted as-is with a CloudEvents content type, so the
    sidecar forwards it without re-wrapping and handles translation to the
    underlying bus. Inbound delivery for this mode arrives via HTTP push
    (see ``notification_dispatcher.api``), so there is no ``subscribe``.
    """

    def __init__(
        self,
        *,
        source: str,
        host: str = "localhost",
        http_port: int = 3500,
        pubsub_name: str = "pubsub",
        timeout: float = 5.0,
        serializer: EnvelopeSerializer | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._source = source
        self._base_url = f"http://{host}:{http_port}"
        self._pubsub_name = pubsub_name
        self._timeout = timeout
        self._serializer = serializer or EnvelopeSerializer()
        self._client = client
        self._lock = asyncio.Lock()

    @property
    def pubsub_name(self) -> str:
        return self._pubsub_name

    async def _get_client(self) -> httpx.AsyncClient:
        """Create the shared HTTP client once, even under concurrent first use."""
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._base_url, timeout=self._timeout
                )
                logger.info(
                    f"Dapr messaging provider initialized "
                    f"({self._base_url}, pubsub={self._pubsub_name})"
                )
        return self._client

    async def publish(
        self,
        topic: str,
        data: dict[str, Any],
        correlation_id: str | None = None,
    ) -> bool:
        try:
            envelope = build_envelope(topic, self._source, data, correlation_id)
            body = self._serializer.serialize(envelope)
            client = await self._get_client()
            response = await client.post(
                f"/v1.0/publish/{self._pubsub_name}/{topic}",
                content=body,
                headers={"Content-Type": CLOUDEVENTS_CONTENT_TYPE},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Dapr publish to {topic} rejected: "
                f"HTTP {e.response.status_code} - {e.response.text}"
            )
            return False
        except Exception as e:  # noqa: BLE001
            logger.error(f"Failed to publish event to {topic} via Dapr: {e}")
            return False

        logger.info(f"Event published to {topic} via Dapr (correlation_id={correlation_id})")
        return True

    async def close(self) -> None:
        """Close the HTTP client if one was created."""
        async with self._lock:
            if self._client is not None:
                logger.info("Closing Dapr messaging provider")
                await self._client.aclose()
                self._client = None
