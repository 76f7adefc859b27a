"""Provider selection and the process-wide messaging provider singleton."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING

from .dapr import DaprProvider
from .memory import InMemoryProvider
from .rabbitmq import RabbitMQConnectionManager, RabbitMQProvider
from .sqs import SQSConnectionManager, SQSProvider

if TYPE_CHECKING:
    from ..config import Settings
    from .ports import IMessagingProvider

logger = logging.getLogger(__name__)


class ProviderType(str, Enum):
    """Supported messaging transports."""

    DAPR = "dapr"
    RABBITMQ = "rabbitmq"
    SQS = "sqs"
    MEMORY = "memory"

    @classmethod
    def parse(cls, value: str | None) -> ProviderType:
        """Map a configuration value to a provider type.

        ``servicebus`` and ``managed`` select the managed bus. Anything
        unrecognised falls back to the sidecar with a warning.
        """
        normalized = (value or "").strip().lower()
        if normalized in _ALIASES:
            return _ALIASES[normalized]
        try:
            return cls(normalized)
        except ValueError:
            logger.warning(
                f"Unknown messaging provider {value!r}, defaulting to {cls.DAPR.value}"
            )
            return cls.DAPR


_ALIASES = {
    "servicebus": ProviderType.SQS,
    "managed": ProviderType.SQS,
}


def create_provider(settings: Settings) -> IMessagingProvider:
    """Build a new provider for the configured transport."""
    provider_type = ProviderType.parse(settings.messaging_provider)
    source = settings.service_name

    if provider_type is ProviderType.RABBITMQ:
        return RabbitMQProvider(
            RabbitMQConnectionManager(settings.rabbitmq_url),
            source=source,
            exchange_name=settings.rabbitmq_exchange,
        )
    if provider_type is ProviderType.SQS:
        return SQSProvider(
            SQSConnectionManager(
                settings.sqs_region, endpoint_url=settings.sqs_endpoint_url
            ),
            source=source,
            queue_names=settings.sqs_queue_names,
        )
    if provider_type is ProviderType.MEMORY:
        return InMemoryProvider(source=source)
    return DaprProvider(
        source=source,
        host=settings.dapr_host,
        http_port=settings.dapr_http_port,
        pubsub_name=settings.dapr_pubsub_name,
        timeout=settings.http_timeout,
    )


_provider: IMessagingProvider | None = None
_lock = asyncio.Lock()


async def get_messaging_provider(settings: Settings | None = None) -> IMessagingProvider:
    """Return the process-wide provider, creating it exactly once.

    Args:
        settings: Used only on first call; defaults to ``get_settings()``.
    """
    global _provider
    if _provider is not None:
        return _provider
    async with _lock:
        if _provider is None:
            if settings is None:
                from ..config import get_settings

                settings = get_settings()
            _provider = create_provider(settings)
            logger.info(
                f"Messaging provider initialized: {type(_provider).__name__}"
            )
    return _provider


async def close_messaging_provider() -> None:
    """Close and forget the singleton; a no-op when none was created."""
    global _provider
    async with _lock:
        provider, _provider = _provider, None
    if provider is not None:
        await provider.close()
        logger.info("Messaging provider closed")


def reset_messaging_provider() -> None:
    """Drop the singleton without closing it (test helper)."""
    global _provider, _lock
    _provider = None
    _lock = asyncio.Lock()
