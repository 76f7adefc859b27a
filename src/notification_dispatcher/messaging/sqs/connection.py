"""SQS client management and queue URL resolution."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from aiobotocore.session import AioSession

from ...exceptions import MessagingConnectionError

logger = logging.getLogger(__name__)

_NON_EXISTENT_QUEUE = "AWS.SimpleQueueService.NonExistentQueue"


class SQSConnectionManager:
    """Owns the single aiobotocore SQS client for the process.

    The client is entered on first use under a lock, so concurrent first
    callers share one client.
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        *,
        endpoint_url: str | None = None,
        session: AioSession | None = None,
        **client_kwargs: Any,
    ) -> None:
        """Configure region, optional endpoint override and client kwargs."""
        self._region = region_name
        self._session = session or AioSession()
        self._client_kwargs = client_kwargs
        if endpoint_url:
            self._client_kwargs["endpoint_url"] = endpoint_url
        self._client: Any = None
        self._client_cm: Any = None
        self._lock = asyncio.Lock()

    async def get_client(self) -> Any:
        """Return the shared SQS client, creating it once."""
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                client_cm = self._session.create_client(
                    "sqs",
                    region_name=self._region,
                    **self._client_kwargs,
                )
                self._client = await client_cm.__aenter__()
                self._client_cm = client_cm
                logger.info(f"SQS client initialized (region={self._region})")
        return self._client

    async def get_queue_url(self, queue_name: str) -> str:
        """Resolve queue name to queue URL, creating the queue if it is missing."""
        client = await self.get_client()
        try:
            out = await client.get_queue_url(QueueName=queue_name)
            return str(out["QueueUrl"])
        except Exception as e:
            err = getattr(e, "response", {}) or {}
            if err.get("Error", {}).get("Code") == _NON_EXISTENT_QUEUE:
                attributes = {"FifoQueue": "true"} if queue_name.endswith(".fifo") else {}
                out = await client.create_queue(QueueName=queue_name, Attributes=attributes)
                logger.info(f"Created SQS queue {queue_name}")
                return str(out["QueueUrl"])
            raise MessagingConnectionError(str(e)) from e

    async def close(self) -> None:
        """Close the client if open."""
        async with self._lock:
            if self._client_cm is not None:
                await self._client_cm.__aexit__(None, None, None)
                self._client_cm = None
                self._client = None
