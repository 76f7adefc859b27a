"""In-process email senders for tests and local runs."""

from __future__ import annotations

from .console import ConsoleEmailSender
from .fake import InMemoryEmailSender, SentMessage

__all__ = ["ConsoleEmailSender", "InMemoryEmailSender", "SentMessage"]
