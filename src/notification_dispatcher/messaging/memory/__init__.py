"""In-memory messaging adapters for testing."""

from __future__ import annotations

from .bus import InMemoryMessageBus
from .provider import InMemoryProvider

__all__ = [
    "InMemoryMessageBus",
    "InMemoryProvider",
]
