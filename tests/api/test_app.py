"""HTTP surface: sidecar push endpoint and subscription descriptor."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from notification_dispatcher.api import create_app
from notification_dispatcher.config import Settings
from notification_dispatcher.messaging import factory
from notification_dispatcher.messaging.memory import InMemoryProvider
from notification_dispatcher.notifications.memory import InMemoryEmailSender
from notification_dispatcher.notifications.orchestrator import NotificationOrchestrator
from notification_dispatcher.subscriptions import SUBSCRIPTION_TOPICS


@pytest.fixture
def client(settings: Settings, orchestrator: NotificationOrchestrator) -> Iterator[TestClient]:
    with TestClient(create_app(settings, orchestrator)) as test_client:
        yield test_client


def test_push_delivery_processes_event(
    client: TestClient, sender: InMemoryEmailSender, provider: InMemoryProvider
) -> None:
    response = client.post(
        "/events/order.placed",
        json={
            "specversion": "1.0",
            "type": "order.placed",
            "id": "evt-1",
            "data": {
                "eventType": "order.placed",
                "userEmail": "ann@example.com",
                "data": {"orderNumber": "ORD-1", "orderId": "o-1", "totalAmount": 1},
            },
        },
    )

    assert response.status_code == 200
    assert response.json() == {"status": "SUCCESS"}
    sender.assert_sent("ann@example.com")
    provider.assert_published("notification.sent")


def test_delivery_failure_still_acknowledged(
    client: TestClient, provider: InMemoryProvider
) -> None:
    response = client.post("/events/order.placed", json={"eventType": "order.placed"})

    assert response.status_code == 200
    provider.assert_published("notification.failed")


def test_undecodable_body_uses_topic(client: TestClient, provider: InMemoryProvider) -> None:
    response = client.post(
        "/events/order.placed",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    provider.assert_published("notification.failed")


def test_unexpected_failure_returns_500(settings: Settings) -> None:
    orchestrator = MagicMock()
    orchestrator.process = AsyncMock(side_effect=RuntimeError("template store down"))

    with TestClient(create_app(settings, orchestrator)) as client:
        response = client.post("/events/order.placed", json={})

    assert response.status_code == 500
    assert response.json() == {"status": "ERROR", "message": "template store down"}


def test_not_initialized_returns_503(settings: Settings) -> None:
    # No lifespan run: the app is used without entering the client context.
    client = TestClient(create_app(settings))
    response = client.post("/events/order.placed", json={})
    assert response.status_code == 503


def test_subscribe_descriptor(client: TestClient, settings: Settings) -> None:
    response = client.get("/dapr/subscribe")

    assert response.status_code == 200
    body = response.json()
    assert [entry["topic"] for entry in body] == list(SUBSCRIPTION_TOPICS)
    assert body[0]["pubsubname"] == settings.dapr_pubsub_name
    assert body[0]["route"] == f"/events/{SUBSCRIPTION_TOPICS[0]}"


def test_dapr_config_is_empty(client: TestClient) -> None:
    assert client.get("/dapr/config").json() == {}


def test_lifespan_builds_and_closes_service(settings: Settings) -> None:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        with TestClient(create_app(settings)) as client:
            response = client.post(
                "/events/order.placed", json={"eventType": "order.placed"}
            )
            assert response.status_code == 200
            provider = factory._provider
    finally:
        root.handlers = handlers
        root.setLevel(level)

    assert isinstance(provider, InMemoryProvider)
    assert provider.closed is True
    provider.assert_published("notification.failed")
