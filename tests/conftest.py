"""Shared fixtures: in-memory transport and sender, a wired orchestrator."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from notification_dispatcher.config import Settings
from notification_dispatcher.messaging.factory import reset_messaging_provider
from notification_dispatcher.messaging.memory import InMemoryProvider
from notification_dispatcher.notifications.dispatcher import EmailDispatcher
from notification_dispatcher.notifications.memory import InMemoryEmailSender
from notification_dispatcher.notifications.orchestrator import NotificationOrchestrator
from notification_dispatcher.notifications.outcome import OutcomePublisher
from notification_dispatcher.notifications.template import TemplateRegistry


@pytest.fixture(autouse=True)
def _reset_provider_singleton() -> Iterator[None]:
    reset_messaging_provider()
    yield
    reset_messaging_provider()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        messaging_provider="memory",
        email_provider="console",
    )


@pytest.fixture
def provider() -> InMemoryProvider:
    return InMemoryProvider()


@pytest.fixture
def sender() -> InMemoryEmailSender:
    return InMemoryEmailSender()


@pytest.fixture
def dispatcher(sender: InMemoryEmailSender) -> EmailDispatcher:
    return EmailDispatcher(sender)


@pytest.fixture
def registry() -> TemplateRegistry:
    return TemplateRegistry.from_catalog()


@pytest.fixture
def orchestrator(
    registry: TemplateRegistry,
    dispatcher: EmailDispatcher,
    provider: InMemoryProvider,
) -> NotificationOrchestrator:
    return NotificationOrchestrator(registry, dispatcher, OutcomePublisher(provider))
