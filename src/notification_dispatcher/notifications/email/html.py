"""HTML layout for notification emails (Jinja2, autoescaped)."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from jinja2 import Environment, select_autoescape
from markupsafe import Markup, escape

_URL = re.compile(r"https?://\S+", re.IGNORECASE)

_LINK = Markup(
    '<a href="{0}" style="color: #4CAF50; text-decoration: none; font-weight: bold;">{0}</a>'
)

_LAYOUT = """\
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Notification from {{ brand }}</title>
    <style>
        body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
        .header { background-color: #4CAF50; color: white; padding: 20px; text-align: center; border-radius: 5px 5px 0 0; }
        .content { background-color: #f9f9f9; padding: 20px; border: 1px solid #ddd; overflow-wrap: break-word; }
        .footer { background-color: #333; color: white; padding: 10px; text-align: center; font-size: 12px; border-radius: 0 0 5px 5px; }
        .event-type { background-color: #e7f3ff; padding: 5px 10px; border-radius: 3px; font-size: 12px; display: inline-block; margin-bottom: 10px; }
    </style>
</head>
<body>
    <div class="header"><h1>{{ brand }} Notification</h1></div>
    <div class="content">
        {% if event_type %}<div class="event-type">Event: {{ event_type }}</div>{% endif %}
        <div style="font-size: 16px; margin: 20px 0;">{{ message }}</div>
    </div>
    <div class="footer">
        <p>This is an automated notification from {{ brand }}. Please do not reply to this email.</p>
        <p style="margin: 5px 0;">Generated at {{ generated_at }}</p>
    </div>
</body>
</html>
"""

_env = Environment(autoescape=select_autoescape(default_for_string=True))
_layout = _env.from_string(_LAYOUT)


def text_to_html(text: str) -> Markup:
    """Escape *text*, turn http(s) URLs into links and newlines into ``<br>``."""
    parts: list[Markup] = []
    position = 0
    for match in _URL.finditer(text):
        parts.append(escape(text[position : match.start()]))
        parts.append(_LINK.format(match.group(0)))
        position = match.end()
    parts.append(escape(text[position:]))
    return Markup("").join(parts).replace("\n", Markup("<br>"))


def render_email_html(
    message: str,
    event_type: str | None = None,
    *,
    brand: str = "xshopai",
    generated_at: datetime | None = None,
) -> str:
    """Wrap a plain-text notification body in the branded HTML layout."""
    return _layout.render(
        brand=brand,
        event_type=event_type,
        message=text_to_html(message),
        generated_at=(generated_at or datetime.now(timezone.utc)).isoformat(),
    )
