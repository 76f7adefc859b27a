"""Provider-agnostic messaging ports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence


@runtime_checkable
class IMessagingProvider(Protocol):
    """
    Port for publishing events to a transport (sidecar, broker, managed bus).

    Infrastructure modules provide concrete adapters. Adapters must never
    raise from ``publish``: failures are logged and reported as ``False``.
    """

    async def publish(
        self,
        topic: str,
        data: dict[str, Any],
        correlation_id: str | None = None,
    ) -> bool:
        """
        Publish *data* to *topic*, wrapped in a CloudEvents envelope.

        Args:
            topic: Topic, routing key or queue name.
            data: Event payload.
            correlation_id: Optional correlation/idempotency key; becomes the
                envelope id when given.

        Returns:
            True if the transport accepted the message.
        """
        ...

    async def close(self) -> None:
        """Release held connections. Safe to call when nothing was opened."""
        ...


@runtime_checkable
class ISubscribingProvider(IMessagingProvider, Protocol):
    """
    A provider that can also consume events directly from the transport.
    """

    async def subscribe(
        self,
        topics: Sequence[str],
        handler: Callable[[dict[str, Any]], Coroutine[Any, Any, None]],
    ) -> None:
        """
        Consume *topics* and invoke *handler* once per delivered event.

        A handler that raises must cause redelivery; a handler that returns
        acknowledges the message.
        """
        ...
