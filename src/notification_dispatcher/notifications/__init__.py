"""Notification pipeline: normalization, templates, delivery and outcome events."""

from __future__ import annotations

from .delivery import (
    DeliveryRecord,
    DeliveryStatus,
    NotificationChannel,
    RenderedNotification,
)
from .dispatcher import EmailDispatcher
from .normalizer import EventEnvelope, SkipSignal, normalize
from .orchestrator import NotificationOrchestrator, ProcessingResult, ProcessingState
from .outcome import NotificationOutcome, OutcomeKind, OutcomePublisher
from .ports import IEmailSender, ITemplateProvider, ITemplateRenderer, NotificationTemplate
from .sanitization import MetadataSanitizer
from .template import PlaceholderRenderer, TemplateRegistry

__all__ = [
    "DeliveryRecord",
    "DeliveryStatus",
    "EmailDispatcher",
    "EventEnvelope",
    "IEmailSender",
    "ITemplateProvider",
    "ITemplateRenderer",
    "MetadataSanitizer",
    "NotificationChannel",
    "NotificationOrchestrator",
    "NotificationOutcome",
    "NotificationTemplate",
    "OutcomeKind",
    "OutcomePublisher",
    "PlaceholderRenderer",
    "ProcessingResult",
    "ProcessingState",
    "SkipSignal",
    "TemplateRegistry",
    "normalize",
]
