"""Email delivery adapters."""

from __future__ import annotations

from .html import render_email_html, text_to_html
from .smtp import SmtpEmailSender

__all__ = ["SmtpEmailSender", "render_email_html", "text_to_html"]
