"""SQS (managed bus) transport adapter."""

from __future__ import annotations

from .connection import SQSConnectionManager
from .provider import QueueSender, SQSProvider

__all__ = [
    "QueueSender",
    "SQSConnectionManager",
    "SQSProvider",
]
