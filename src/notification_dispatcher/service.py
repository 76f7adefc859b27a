"""Bootstrap: builds the pipeline and its transport from ``Settings``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .messaging.factory import close_messaging_provider, get_messaging_provider
from .messaging.ports import ISubscribingProvider
from .notifications.dispatcher import EmailDispatcher
from .notifications.email.smtp import SmtpEmailSender
from .notifications.memory.console import ConsoleEmailSender
from .notifications.orchestrator import NotificationOrchestrator
from .notifications.outcome import OutcomePublisher
from .notifications.template.registry import TemplateRegistry
from .router import EventRouter
from .subscriptions import SUBSCRIPTION_TOPICS

if TYPE_CHECKING:
    from .config import Settings
    from .messaging.ports import IMessagingProvider
    from .notifications.ports.sender import IEmailSender

logger = logging.getLogger(__name__)


def build_email_sender(settings: Settings) -> IEmailSender:
    """Select the email adapter named by ``EMAIL_PROVIDER``."""
    provider = settings.email_provider.strip().lower()
    if provider == "console":
        return ConsoleEmailSender()
    if provider != "smtp":
        logger.warning(f"Unknown email provider {settings.email_provider!r}, falling back to smtp")
    return SmtpEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_user or None,
        password=settings.smtp_password or None,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout,
        from_email=settings.email_from_address,
        from_name=settings.email_from_name,
    )


@dataclass
class NotificationService:
    """The assembled service: provider, orchestrator and broker router."""

    settings: Settings
    provider: IMessagingProvider
    orchestrator: NotificationOrchestrator
    router: EventRouter
    owns_shared_provider: bool = field(default=False)

    @classmethod
    async def create(
        cls,
        settings: Settings,
        *,
        provider: IMessagingProvider | None = None,
        sender: IEmailSender | None = None,
        templates: TemplateRegistry | None = None,
    ) -> NotificationService:
        """Wire the pipeline. Without *provider* the process-wide one is used."""
        owns_shared_provider = provider is None
        if provider is None:
            provider = await get_messaging_provider(settings)

        dispatcher = EmailDispatcher(
            sender or build_email_sender(settings), enabled=settings.email_enabled
        )
        orchestrator = NotificationOrchestrator(
            templates or TemplateRegistry.from_catalog(),
            dispatcher,
            OutcomePublisher(provider),
        )
        router = EventRouter(orchestrator, type_prefix=settings.event_type_prefix)
        return cls(
            settings=settings,
            provider=provider,
            orchestrator=orchestrator,
            router=router,
            owns_shared_provider=owns_shared_provider,
        )

    async def start_consuming(self) -> bool:
        """Subscribe the router when the transport consumes directly.

        Returns False for push-based transports (the sidecar delivers over HTTP).
        """
        if not isinstance(self.provider, ISubscribingProvider):
            logger.info("Provider has no subscribe; expecting HTTP push delivery")
            return False
        await self.provider.subscribe(SUBSCRIPTION_TOPICS, self.router.route)
        logger.info(f"Subscribed to {len(SUBSCRIPTION_TOPICS)} topics")
        return True

    async def close(self) -> None:
        """Release the transport. Safe to call more than once."""
        if self.owns_shared_provider:
            await close_messaging_provider()
        else:
            await self.provider.close()
