"""Tests for the in-memory provider and bus."""

from __future__ import annotations

from typing import Any

import pytest

from notification_dispatcher.messaging.memory import InMemoryMessageBus, InMemoryProvider
from notification_dispatcher.messaging.ports import IMessagingProvider, ISubscribingProvider


def test_satisfies_subscribing_port() -> None:
    provider = InMemoryProvider()
    assert isinstance(provider, IMessagingProvider)
    assert isinstance(provider, ISubscribingProvider)


@pytest.mark.asyncio
async def test_publish_records_envelope() -> None:
    provider = InMemoryProvider(source="svc")
    assert await provider.publish("notification.sent", {"a": 1}, correlation_id="t1") is True

    provider.assert_published("notification.sent")
    (topic, envelope), = provider.get_published()
    assert topic == "notification.sent"
    assert envelope.source == "svc"
    assert envelope.id == "t1"
    assert envelope.data == {"a": 1}


@pytest.mark.asyncio
async def test_fail_publish_reports_false_and_records_nothing() -> None:
    provider = InMemoryProvider(fail_publish=True)
    assert await provider.publish("t", {}) is False
    assert provider.get_published() == []


@pytest.mark.asyncio
async def test_subscribers_receive_cloudevent_dict() -> None:
    received: list[dict[str, Any]] = []

    async def handler(event: dict[str, Any]) -> None:
        received.append(event)

    bus = InMemoryMessageBus()
    consumer = InMemoryProvider(bus)
    producer = InMemoryProvider(bus)
    await consumer.subscribe(["order.placed", "order.cancelled"], handler)

    await producer.publish("order.placed", {"orderId": "o1"})
    await producer.publish("payment.failed", {})

    assert len(received) == 1
    assert received[0]["type"] == "order.placed"
    assert received[0]["data"] == {"orderId": "o1"}


@pytest.mark.asyncio
async def test_failing_subscriber_makes_publish_report_false(
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def handler(event: dict[str, Any]) -> None:
        raise RuntimeError("handler broke")

    provider = InMemoryProvider()
    await provider.subscribe(["notification.sent"], handler)

    with caplog.at_level("ERROR"):
        ok = await provider.publish("notification.sent", {"a": 1})

    assert ok is False
    assert "handler broke" in caplog.text


@pytest.mark.asyncio
async def test_close_marks_closed() -> None:
    provider = InMemoryProvider()
    await provider.close()
    assert provider.closed is True


def test_assert_published_reports_mismatch() -> None:
    provider = InMemoryProvider()
    with pytest.raises(AssertionError, match="Expected 1 message"):
        provider.assert_published("nothing")
