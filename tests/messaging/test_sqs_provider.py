"""Unit tests for SQSProvider and SQSConnectionManager (mocked aiobotocore, no AWS)."""

from __future__ import annotations

import asyncio
import json
import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from notification_dispatcher.exceptions import MessagingConnectionError
from notification_dispatcher.messaging.sqs import SQSConnectionManager, SQSProvider
from notification_dispatcher.messaging.sqs.provider import queue_name_for

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123/notification-sent"


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.send_message = AsyncMock(return_value={"MessageId": "m-1"})
    return client


@pytest.fixture
def connection(client: MagicMock) -> MagicMock:
    conn = MagicMock()
    conn.get_client = AsyncMock(return_value=client)
    conn.get_queue_url = AsyncMock(return_value=QUEUE_URL)
    conn.close = AsyncMock()
    return conn


@pytest.fixture
def provider(connection: MagicMock) -> SQSProvider:
    return SQSProvider(connection, source="notification-service")


@pytest.mark.asyncio
async def test_publish_sends_cloudevent_with_attributes(
    provider: SQSProvider, client: MagicMock
) -> None:
    ok = await provider.publish("notification.sent", {"a": 1}, correlation_id="trace-1")

    assert ok is True
    kwargs = client.send_message.call_args.kwargs
    assert kwargs["QueueUrl"] == QUEUE_URL
    assert json.loads(kwargs["MessageBody"])["data"] == {"a": 1}
    attributes = kwargs["MessageAttributes"]
    assert attributes["eventType"]["StringValue"] == "notification.sent"
    assert attributes["source"]["StringValue"] == "notification-service"
    assert attributes["correlationId"]["StringValue"] == "trace-1"
    assert "MessageDeduplicationId" not in kwargs


@pytest.mark.asyncio
async def test_one_sender_per_topic(provider: SQSProvider, connection: MagicMock) -> None:
    await provider.publish("notification.sent", {})
    await provider.publish("notification.sent", {})
    await provider.publish("notification.failed", {})

    assert connection.get_queue_url.await_count == 2
    assert set(provider.senders) == {"notification.sent", "notification.failed"}


@pytest.mark.asyncio
async def test_dotted_topics_resolve_to_valid_queue_names(
    provider: SQSProvider, connection: MagicMock
) -> None:
    await provider.publish("notification.sent", {})
    await provider.publish("notification.failed", {})

    names = [c.args[0] for c in connection.get_queue_url.await_args_list]
    assert names == ["notification-sent", "notification-failed"]
    assert all(re.fullmatch(r"[A-Za-z0-9_-]{1,80}(\.fifo)?", name) for name in names)


@pytest.mark.asyncio
async def test_configured_queue_name_overrides_derived_name(connection: MagicMock) -> None:
    provider = SQSProvider(
        connection,
        source="notification-service",
        queue_names={"notification.sent": "prod_notifications"},
    )
    await provider.publish("notification.sent", {})
    await provider.publish("notification.failed", {})

    names = [c.args[0] for c in connection.get_queue_url.await_args_list]
    assert names == ["prod_notifications", "notification-failed"]


@pytest.mark.parametrize(
    "topic,expected",
    [
        ("notification.sent", "notification-sent"),
        ("order.placed.fifo", "order-placed.fifo"),
        ("already_valid-name", "already_valid-name"),
        ("user:email/verified", "user-email-verified"),
    ],
)
def test_queue_name_for(topic: str, expected: str) -> None:
    assert queue_name_for(topic) == expected


@pytest.mark.asyncio
async def test_concurrent_first_publish_creates_one_sender(
    provider: SQSProvider, connection: MagicMock
) -> None:
    results = await asyncio.gather(*(provider.publish("t", {}) for _ in range(5)))
    assert all(results)
    connection.get_queue_url.assert_awaited_once_with("t")


@pytest.mark.asyncio
async def test_fifo_queue_gets_dedup_and_group_ids(
    provider: SQSProvider, connection: MagicMock, client: MagicMock
) -> None:
    connection.get_queue_url.return_value = QUEUE_URL + ".fifo"
    await provider.publish("notification.sent", {}, correlation_id="trace-9")

    kwargs = client.send_message.call_args.kwargs
    assert kwargs["MessageDeduplicationId"] == "trace-9"
    assert kwargs["MessageGroupId"] == "trace-9"


@pytest.mark.asyncio
async def test_send_failure_returns_false(provider: SQSProvider, client: MagicMock) -> None:
    client.send_message.side_effect = RuntimeError("throttled")
    assert await provider.publish("t", {}) is False


@pytest.mark.asyncio
async def test_close_disposes_senders_then_client(
    provider: SQSProvider, connection: MagicMock
) -> None:
    await provider.publish("a", {})
    await provider.publish("b", {})
    senders = list(provider.senders.values())

    await provider.close()

    assert all(sender.closed for sender in senders)
    assert provider.senders == {}
    connection.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_without_publish_is_safe(provider: SQSProvider, connection: MagicMock) -> None:
    await provider.close()
    connection.close.assert_awaited_once()


# ── Connection manager ───────────────────────────────────────────────


@pytest.fixture
def mock_session() -> MagicMock:
    session = MagicMock()
    mock_cm = MagicMock()
    mock_client = MagicMock()
    mock_client.get_queue_url = AsyncMock(return_value={"QueueUrl": QUEUE_URL})
    mock_client.create_queue = AsyncMock(
        return_value={"QueueUrl": "https://sqs.us-east-1.amazonaws.com/123/new-queue"}
    )
    mock_cm.__aenter__ = AsyncMock(return_value=mock_client)
    mock_cm.__aexit__ = AsyncMock(return_value=None)
    session.create_client = MagicMock(return_value=mock_cm)
    return session


@pytest.mark.asyncio
async def test_client_created_once_under_concurrency(mock_session: MagicMock) -> None:
    conn = SQSConnectionManager(
        "eu-west-1", endpoint_url="http://localstack:4566", session=mock_session
    )
    clients = await asyncio.gather(*(conn.get_client() for _ in range(5)))

    assert all(c is clients[0] for c in clients)
    mock_session.create_client.assert_called_once()
    kwargs = mock_session.create_client.call_args.kwargs
    assert kwargs["region_name"] == "eu-west-1"
    assert kwargs["endpoint_url"] == "http://localstack:4566"


@pytest.mark.asyncio
async def test_missing_queue_is_created(mock_session: MagicMock) -> None:
    client = mock_session.create_client.return_value.__aenter__.return_value

    class QueueNotFound(Exception):  # noqa: N818
        response = {"Error": {"Code": "AWS.SimpleQueueService.NonExistentQueue"}}

    client.get_queue_url.side_effect = QueueNotFound()
    conn = SQSConnectionManager(session=mock_session)

    url = await conn.get_queue_url("new-queue")

    assert url.endswith("/new-queue")
    client.create_queue.assert_awaited_once_with(QueueName="new-queue", Attributes={})


@pytest.mark.asyncio
async def test_other_lookup_errors_raise_connection_error(mock_session: MagicMock) -> None:
    client = mock_session.create_client.return_value.__aenter__.return_value
    client.get_queue_url.side_effect = RuntimeError("access denied")
    conn = SQSConnectionManager(session=mock_session)

    with pytest.raises(MessagingConnectionError):
        await conn.get_queue_url("q")


@pytest.mark.asyncio
async def test_close_exits_client_context(mock_session: MagicMock) -> None:
    conn = SQSConnectionManager(session=mock_session)
    await conn.close()  # nothing open yet
    await conn.get_client()
    await conn.close()
    mock_session.create_client.return_value.__aexit__.assert_awaited_once()

