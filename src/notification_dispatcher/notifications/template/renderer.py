"""Placeholder rendering, variable overlay and the basic-notification fallback."""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from ...exceptions import TemplateRenderError
from ..delivery import RenderedNotification

if TYPE_CHECKING:
    from ..normalizer import EventEnvelope
    from ..ports.renderer import NotificationTemplate

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*([\w.\-]+)\s*\}\}")


class PlaceholderRenderer:
    """
    Substitutes ``{{name}}`` placeholders in subject and body.

    A placeholder whose name is a key of the variables is replaced by the
    value's string form (``None`` becomes an empty string). Unknown names are
    left verbatim so a bad variable set shows up in the output instead of
    silently dropping text.
    """

    def render(
        self,
        template: NotificationTemplate,
        variables: dict[str, Any],
    ) -> RenderedNotification:
        try:
            subject = None
            if template.subject_template is not None:
                subject = self.substitute(template.subject_template, variables)
            body = self.substitute(template.body_template, variables)
        except Exception as e:
            logger.error(f"Template rendering failed for {template.name!r}: {e}")
            raise TemplateRenderError(template.name, str(e)) from e
        return RenderedNotification(subject=subject, body=body)

    @staticmethod
    def substitute(text: str, variables: dict[str, Any]) -> str:
        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in variables:
                return match.group(0)
            value = variables[name]
            return "" if value is None else str(value)

        return _PLACEHOLDER.sub(replace, text)


def build_variables(envelope: EventEnvelope) -> dict[str, Any]:
    """Merge template variables from the envelope in three tiers.

    1. the canonical fields (``userId``, ``userEmail``, ``userPhone``,
       ``eventType``, ``timestamp``);
    2. every other top-level field the producer sent, except ``data``;
    3. every key of ``data``.

    Later tiers win, so a field nested under ``data`` overrides a top-level
    field of the same name.
    """
    variables: dict[str, Any] = {
        "userId": envelope.user_id,
        "userEmail": envelope.user_email,
        "userPhone": envelope.user_phone,
        "eventType": envelope.event_type,
        "timestamp": envelope.timestamp,
    }
    variables.update({k: v for k, v in envelope.extras.items() if v is not None})
    variables.update(envelope.data)
    return variables


def format_event_label(event_type: str) -> str:
    """``order.placed`` -> ``Order Placed``."""
    label = " ".join(
        segment[:1].upper() + segment[1:] for segment in event_type.split(".") if segment
    )
    return label or "Notification"


def basic_notification(envelope: EventEnvelope) -> RenderedNotification:
    """Generic rendering used when no template resolves."""
    subject = format_event_label(envelope.event_type)
    body = f"{subject} notification"
    if envelope.data:
        body += "\n\n" + json.dumps(envelope.data, indent=2, default=str)
    return RenderedNotification(subject=subject, body=body)
