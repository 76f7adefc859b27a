"""NotificationOrchestrator: runs one inbound event through the pipeline."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..correlation import trace_context
from .delivery import NotificationChannel
from .dispatcher import DELIVERY_DISABLED, NO_RECIPIENT, SEND_FAILED
from .normalizer import SkipSignal, normalize
from .template.renderer import PlaceholderRenderer, basic_notification, build_variables

if TYPE_CHECKING:
    from .delivery import RenderedNotification
    from .dispatcher import EmailDispatcher
    from .normalizer import EventEnvelope
    from .outcome import OutcomePublisher
    from .ports.renderer import ITemplateRenderer
    from .template.registry import TemplateRegistry

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Notification"


class ProcessingState(str, Enum):
    """Pipeline states; ``DONE`` and ``SKIPPED`` are terminal."""

    RECEIVED = "received"
    NORMALIZED = "normalized"
    RENDERED = "rendered"
    DISPATCHED = "dispatched"
    OUTCOME_PUBLISHED = "outcome_published"
    DONE = "done"
    SKIPPED = "skipped"


def _transition(notification_id: str, state: ProcessingState) -> None:
    logger.debug(f"Notification {notification_id} -> {state.value}")


@dataclass(frozen=True)
class ProcessingResult:
    """What happened to one inbound event."""

    state: ProcessingState
    notification_id: str | None = None
    delivered: bool = False
    outcome_published: bool = False
    error_message: str | None = None
    event_type: str | None = None


class NotificationOrchestrator:
    """
    Sequences normalize, render, dispatch and outcome publication.

    Holds no per-event state, so one instance serves concurrent events.
    Expected failures (malformed envelope, template miss, delivery failure,
    outcome publish failure) end in a normal result; anything unexpected from
    normalization, rendering or dispatch is logged and re-raised so the
    transport redelivers the event.
    """

    def __init__(
        self,
        templates: TemplateRegistry,
        dispatcher: EmailDispatcher,
        outcomes: OutcomePublisher,
        *,
        renderer: ITemplateRenderer | None = None,
        channel: NotificationChannel = NotificationChannel.EMAIL,
    ) -> None:
        self._templates = templates
        self._dispatcher = dispatcher
        self._outcomes = outcomes
        self._renderer: ITemplateRenderer = renderer or PlaceholderRenderer()
        self._channel = channel

    async def process(self, raw_payload: Any, topic: str | None) -> ProcessingResult:
        """Process one inbound event delivered on *topic*."""
        logger.debug(f"Event {ProcessingState.RECEIVED.value} on {topic!r}")
        normalized = normalize(raw_payload, topic)
        if isinstance(normalized, SkipSignal):
            logger.warning(f"Skipping event on {topic!r}: {normalized.reason}")
            return ProcessingResult(
                state=ProcessingState.SKIPPED, error_message=normalized.reason
            )

        with trace_context(normalized.trace_id, normalized.span_id):
            return await self._run(normalized)

    async def _run(self, envelope: EventEnvelope) -> ProcessingResult:
        started = time.monotonic()
        notification_id = str(uuid.uuid4())
        logger.info(
            f"Received notification event: {envelope.event_type} "
            f"(notification_id={notification_id}, user_id={envelope.user_id})"
        )
        _transition(notification_id, ProcessingState.NORMALIZED)

        try:
            rendered = await self.render(envelope)
            _transition(notification_id, ProcessingState.RENDERED)
            subject = rendered.subject or DEFAULT_SUBJECT
            recipient = envelope.user_email

            delivered = False
            if not recipient:
                error_message: str | None = NO_RECIPIENT
            elif not self._dispatcher.enabled:
                error_message = DELIVERY_DISABLED
            else:
                delivered = await self._dispatcher.send(
                    recipient,
                    subject,
                    rendered.body,
                    metadata={
                        "event_type": envelope.event_type,
                        "notification_id": notification_id,
                        "user_id": envelope.user_id,
                        "data": envelope.data,
                    },
                )
                error_message = None if delivered else SEND_FAILED
            _transition(notification_id, ProcessingState.DISPATCHED)
        except Exception:
            logger.exception(
                f"Failed to process notification event {envelope.event_type} "
                f"(notification_id={notification_id})"
            )
            raise

        if delivered:
            assert recipient is not None
            published = await self._outcomes.publish_sent(
                notification_id=notification_id,
                original_event_type=envelope.event_type,
                user_id=envelope.user_id,
                recipient_email=recipient,
                subject=subject,
                trace_id=envelope.trace_id,
                span_id=envelope.span_id,
                attempt_number=envelope.attempt_number,
            )
            logger.info(
                f"Email notification sent to {recipient} "
                f"({(time.monotonic() - started) * 1000:.0f}ms)"
            )
        else:
            assert error_message is not None
            published = await self._outcomes.publish_failed(
                notification_id=notification_id,
                original_event_type=envelope.event_type,
                user_id=envelope.user_id,
                recipient_email=recipient,
                subject=subject,
                error_message=error_message,
                trace_id=envelope.trace_id,
                span_id=envelope.span_id,
                attempt_number=envelope.attempt_number,
            )
            logger.warning(f"Email notification not delivered: {error_message}")
        if published:
            _transition(notification_id, ProcessingState.OUTCOME_PUBLISHED)

        return ProcessingResult(
            state=ProcessingState.DONE,
            notification_id=notification_id,
            delivered=delivered,
            outcome_published=published,
            error_message=error_message,
            event_type=envelope.event_type,
        )

    async def render(self, envelope: EventEnvelope) -> RenderedNotification:
        """Render from the matching template, or fall back to the basic notification."""
        template = await self._templates.resolve(envelope.event_type, self._channel)
        if template is None:
            logger.warning(
                f"No template found for event: {envelope.event_type}, "
                f"channel: {self._channel.value}"
            )
            return basic_notification(envelope)
        rendered = self._renderer.render(template, build_variables(envelope))
        logger.info(f"Notification rendered with template {template.name!r}")
        return rendered
