"""Event-driven notification dispatcher.

Consumes domain events from a message bus, renders and delivers email
notifications, and publishes ``notification.sent`` / ``notification.failed``
outcome events.
"""

from __future__ import annotations

from .config import Settings, get_settings
from .exceptions import (
    ConfigurationError,
    InfrastructureError,
    MessagingConnectionError,
    MessagingError,
    MessagingSerializationError,
    NotificationDeliveryError,
    NotificationDispatcherError,
    NotificationError,
    TemplateRenderError,
)

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "InfrastructureError",
    "MessagingConnectionError",
    "MessagingError",
    "MessagingSerializationError",
    "NotificationDeliveryError",
    "NotificationDispatcherError",
    "NotificationError",
    "Settings",
    "TemplateRenderError",
    "get_settings",
    "__version__",
]
