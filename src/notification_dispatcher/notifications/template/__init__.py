"""Template catalog, registry and renderer."""

from __future__ import annotations

from .catalog import DEFAULT_TEMPLATES
from .provider import InMemoryTemplateProvider
from .registry import TemplateRegistry
from .renderer import (
    PlaceholderRenderer,
    basic_notification,
    build_variables,
    format_event_label,
)

__all__ = [
    "DEFAULT_TEMPLATES",
    "InMemoryTemplateProvider",
    "PlaceholderRenderer",
    "TemplateRegistry",
    "basic_notification",
    "build_variables",
    "format_event_label",
]
