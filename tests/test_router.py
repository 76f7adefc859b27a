"""EventRouter topic resolution and failure propagation."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from notification_dispatcher.router import EventRouter


@pytest.fixture
def mock_orchestrator() -> MagicMock:
    orchestrator = MagicMock()
    orchestrator.process = AsyncMock(return_value="result")
    return orchestrator


def test_resolve_topic_strips_prefix(mock_orchestrator: MagicMock) -> None:
    router = EventRouter(mock_orchestrator)
    assert router.resolve_topic("com.xshopai.order.placed") == "order.placed"
    assert router.resolve_topic("order.placed") == "order.placed"
    assert router.resolve_topic("") is None
    assert router.resolve_topic(None) is None


@pytest.mark.asyncio
async def test_routes_subscribed_topic(mock_orchestrator: MagicMock) -> None:
    event = {"type": "com.xshopai.order.placed", "data": {"eventType": "order.placed"}}

    assert await EventRouter(mock_orchestrator).route(event) == "result"
    mock_orchestrator.process.assert_awaited_once_with(event, "order.placed")


@pytest.mark.asyncio
async def test_unsubscribed_topic_is_dropped(
    mock_orchestrator: MagicMock, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("WARNING"):
        result = await EventRouter(mock_orchestrator).route({"type": "inventory.low"})

    assert result is None
    mock_orchestrator.process.assert_not_awaited()
    assert "No handler found" in caplog.text


@pytest.mark.asyncio
async def test_custom_topics_and_prefix(mock_orchestrator: MagicMock) -> None:
    router = EventRouter(mock_orchestrator, topics=["inventory.low"], type_prefix="acme.")
    await router.route({"type": "acme.inventory.low"})
    mock_orchestrator.process.assert_awaited_once()


@pytest.mark.asyncio
async def test_orchestrator_failure_propagates(mock_orchestrator: MagicMock) -> None:
    mock_orchestrator.process.side_effect = RuntimeError("boom")
    with pytest.raises(RuntimeError):
        await EventRouter(mock_orchestrator).route({"type": "order.placed"})
