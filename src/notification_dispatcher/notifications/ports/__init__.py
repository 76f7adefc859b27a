"""Port definitions for notification infrastructure."""

from __future__ import annotations

from .provider import ITemplateProvider
from .renderer import ITemplateRenderer, NotificationTemplate
from .sender import IEmailSender

__all__ = [
    "IEmailSender",
    "ITemplateProvider",
    "ITemplateRenderer",
    "NotificationTemplate",
]
