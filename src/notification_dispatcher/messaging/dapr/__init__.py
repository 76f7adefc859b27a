"""Dapr sidecar transport adapter."""

from __future__ import annotations

from .provider import DaprProvider

__all__ = ["DaprProvider"]
