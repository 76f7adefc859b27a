"""Provider-agnostic messaging: ports, CloudEvents envelope and transport adapters."""

from __future__ import annotations

from .envelope import MessageEnvelope, build_envelope
from .factory import (
    ProviderType,
    close_messaging_provider,
    create_provider,
    get_messaging_provider,
    reset_messaging_provider,
)
from .ports import IMessagingProvider, ISubscribingProvider
from .serialization import EnvelopeSerializer

__all__ = [
    "EnvelopeSerializer",
    "IMessagingProvider",
    "ISubscribingProvider",
    "MessageEnvelope",
    "ProviderType",
    "build_envelope",
    "close_messaging_provider",
    "create_provider",
    "get_messaging_provider",
    "reset_messaging_provider",
]
