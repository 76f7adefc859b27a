"""Inbound topics: one list feeding both the sidecar descriptor and the broker binding."""

from __future__ import annotations

from typing import Any

SUBSCRIPTION_TOPICS: tuple[str, ...] = (
    # auth-service
    "auth.user.registered",
    "auth.email.verification.requested",
    "auth.password.reset.requested",
    "auth.password.reset.completed",
    # user-service
    "user.created",
    "user.updated",
    "user.deleted",
    "user.email.verified",
    "user.password.changed",
    # order-service
    "order.placed",
    "order.cancelled",
    "order.shipped",
    "order.delivered",
    # payment-service
    "payment.received",
    "payment.failed",
    # profile operations (user-service)
    "profile.password_changed",
    "profile.notification_preferences_updated",
    "profile.bank_details_updated",
)


def event_route(topic: str) -> str:
    """HTTP route the sidecar pushes *topic* to."""
    return f"/events/{topic}"


def dapr_subscriptions(pubsub_name: str = "pubsub") -> list[dict[str, Any]]:
    """Programmatic subscription descriptors served at ``GET /dapr/subscribe``."""
    return [
        {"pubsubname": pubsub_name, "topic": topic, "route": event_route(topic)}
        for topic in SUBSCRIPTION_TOPICS
    ]
