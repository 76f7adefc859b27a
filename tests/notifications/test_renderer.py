"""Placeholder rendering, variable overlay and the basic fallback."""

from __future__ import annotations

import pytest

from notification_dispatcher.exceptions import TemplateRenderError
from notification_dispatcher.notifications.delivery import NotificationChannel
from notification_dispatcher.notifications.normalizer import EventEnvelope, normalize
from notification_dispatcher.notifications.ports.renderer import NotificationTemplate
from notification_dispatcher.notifications.template.renderer import (
    PlaceholderRenderer,
    basic_notification,
    build_variables,
    format_event_label,
)


def _template(body: str, subject: str | None = "Subject") -> NotificationTemplate:
    return NotificationTemplate(
        event_type="order.placed",
        channel=NotificationChannel.EMAIL,
        name="Test",
        body_template=body,
        subject_template=subject,
    )


def _envelope(raw: dict) -> EventEnvelope:
    result = normalize(raw, None)
    assert isinstance(result, EventEnvelope)
    return result


class TestPlaceholderRenderer:
    def test_substitutes_known_placeholders(self) -> None:
        rendered = PlaceholderRenderer().render(
            _template("Hi {{ name }}, order {{orderId}}", subject="Order #{{orderNumber}}"),
            {"name": "Ann", "orderId": "o-1", "orderNumber": 7},
        )
        assert rendered.subject == "Order #7"
        assert rendered.body == "Hi Ann, order o-1"

    def test_unknown_placeholders_stay_verbatim(self) -> None:
        rendered = PlaceholderRenderer().render(_template("Track {{trackingNumber}}"), {})
        assert rendered.body == "Track {{trackingNumber}}"

    def test_none_renders_as_empty_string(self) -> None:
        rendered = PlaceholderRenderer().render(_template("[{{reason}}]"), {"reason": None})
        assert rendered.body == "[]"

    def test_rendering_is_deterministic(self) -> None:
        renderer = PlaceholderRenderer()
        template = _template("{{a}} {{b}} {{c}}")
        variables = {"a": 1, "b": None}
        assert renderer.render(template, variables) == renderer.render(template, variables)

    def test_template_without_subject(self) -> None:
        rendered = PlaceholderRenderer().render(_template("body", subject=None), {})
        assert rendered.subject is None

    def test_unrenderable_value_raises_render_error(self) -> None:
        class Unprintable:
            def __str__(self) -> str:
                raise RuntimeError("boom")

        with pytest.raises(TemplateRenderError, match="Test"):
            PlaceholderRenderer().render(_template("{{x}}"), {"x": Unprintable()})


class TestBuildVariables:
    def test_canonical_fields_present(self) -> None:
        variables = build_variables(
            _envelope({"eventType": "order.placed", "userId": "u-1", "userEmail": "a@b.c"})
        )
        assert variables["eventType"] == "order.placed"
        assert variables["userId"] == "u-1"
        assert variables["userEmail"] == "a@b.c"

    def test_data_overrides_top_level_fields(self) -> None:
        variables = build_variables(
            _envelope({"eventType": "order.placed", "subject": "A", "data": {"subject": "B"}})
        )
        assert variables["subject"] == "B"

    def test_top_level_extras_included(self) -> None:
        variables = build_variables(
            _envelope({"eventType": "order.placed", "orderNumber": "N-1", "data": {}})
        )
        assert variables["orderNumber"] == "N-1"
        assert "data" not in variables


class TestBasicNotification:
    @pytest.mark.parametrize(
        ("event_type", "label"),
        [
            ("order.placed", "Order Placed"),
            ("auth.password.reset.requested", "Auth Password Reset Requested"),
            ("profile.bank_details_updated", "Profile Bank_details_updated"),
            ("...", "Notification"),
            ("", "Notification"),
        ],
    )
    def test_event_label(self, event_type: str, label: str) -> None:
        assert format_event_label(event_type) == label

    def test_body_includes_pretty_printed_data(self) -> None:
        rendered = basic_notification(
            _envelope({"eventType": "order.returned", "data": {"orderId": "o-1"}})
        )
        assert rendered.subject == "Order Returned"
        assert rendered.body.startswith("Order Returned notification\n\n{")
        assert '"orderId": "o-1"' in rendered.body

    def test_body_without_data(self) -> None:
        rendered = basic_notification(_envelope({"eventType": "order.returned"}))
        assert rendered.body == "Order Returned notification"
