"""Exception hierarchy for notification-dispatcher."""

from __future__ import annotations


class NotificationDispatcherError(Exception):
    """Root exception for the entire notification dispatcher."""


class ConfigurationError(NotificationDispatcherError):
    """Raised when settings are missing or inconsistent for the selected backend."""


class InfrastructureError(NotificationDispatcherError):
    """Base class for all infrastructure-related errors."""


# ── Messaging ────────────────────────────────────────────────────────


class MessagingError(InfrastructureError):
    """Base class for all messaging-related infrastructure errors."""


class MessagingConnectionError(MessagingError):
    """Raised when connectivity to the message transport fails."""


class MessagingSerializationError(MessagingError):
    """Raised when message serialization or deserialization fails."""


# ── Notifications ────────────────────────────────────────────────────


class NotificationError(InfrastructureError):
    """Base exception for notification infrastructure failures."""


class NotificationDeliveryError(NotificationError):
    """Raised by sender adapters when delivery fails (network, provider error, etc.)."""

    def __init__(self, channel: str, recipient: str, reason: str) -> None:
        self.channel = channel
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Failed to deliver via {channel} to {recipient}: {reason}")


class TemplateRenderError(NotificationError):
    """Raised when a template cannot be rendered at all (not for unknown variables)."""

    def __init__(self, template_name: str, reason: str) -> None:
        self.template_name = template_name
        super().__init__(f"Failed to render template {template_name!r}: {reason}")
