"""RabbitMQ transport adapter."""

from __future__ import annotations

from .connection import RabbitMQConnectionManager
from .provider import RabbitMQProvider

__all__ = [
    "RabbitMQConnectionManager",
    "RabbitMQProvider",
]
