"""Metadata sanitization: keeps credentials out of provider logs and dashboards."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable
from typing import Any

MASK = "***"

_SEPARATORS = re.compile(r"[_\-\s]")

# Compared after normalization, so ``resetToken``, ``reset_token`` and
# ``RESET-TOKEN`` are the same field. Email and phone stay visible.
_DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "passphrase",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "resettoken",
        "verificationtoken",
        "authorization",
        "apikey",
        "privatekey",
        "cardnumber",
        "cvv",
    }
)


def _normalize_key(key: Any) -> str:
    return _SEPARATORS.sub("", str(key)).lower()


def _normalize_all(fields: Iterable[str] | None) -> frozenset[str]:
    return frozenset(_normalize_key(f) for f in fields or ())


class MetadataSanitizer:
    """
    Returns a copy of notification metadata with secrets masked.

    Key matching ignores case, underscores and dashes, and recurses into
    nested mappings and lists. ``hash_fields`` are replaced by a sha256 digest
    so they stay correlatable without being readable; ``redact_fields`` extend
    the default sensitive set, ``sensitive_fields`` replace it.
    """

    def __init__(
        self,
        *,
        redact_fields: set[str] | None = None,
        hash_fields: set[str] | None = None,
        sensitive_fields: set[str] | None = None,
    ) -> None:
        base = (
            _normalize_all(sensitive_fields)
            if sensitive_fields is not None
            else _DEFAULT_SENSITIVE_FIELDS
        )
        self._masked = base | _normalize_all(redact_fields)
        self._hashed = _normalize_all(hash_fields)

    def sanitize(self, metadata: dict[str, Any]) -> dict[str, Any]:
        """Return a sanitized copy of metadata safe for logging/providers."""
        return {
            str(key): self._clean(value, _normalize_key(key)) for key, value in metadata.items()
        }

    def _clean(self, value: Any, field: str) -> Any:
        if isinstance(value, dict):
            return self.sanitize(value)
        if isinstance(value, list):
            return [self._clean(item, field) for item in value]
        if field in self._hashed:
            return "sha256:" + hashlib.sha256(str(value).encode("utf-8")).hexdigest()
        if field in self._masked:
            return MASK
        return value


default_sanitizer = MetadataSanitizer()
