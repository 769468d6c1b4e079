"""Keep OpenWeatherMap keys and similar credentials out of logs and messages."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

import httpx

REDACTED = "[REDACTED]"

_SENSITIVE_NAME_RE = re.compile(
    r"^(appid|api[_-]?key|token|secret|authorization)$",
    re.IGNORECASE,
)
_KEY_VALUE_SECRET_RE = re.compile(
    r"""(?ix)
    \b
    (appid|token|secret|api[_-]?key|authorization)
    \s*[:=]\s*
    ([^\s,;&]+)
    """
)


def is_sensitive_name(name: Any) -> bool:
    return bool(_SENSITIVE_NAME_RE.match(str(name)))


def sanitize_text(text: str) -> str:
    """Replace `appid=...`-style values embedded in text or query strings."""
    return _KEY_VALUE_SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", text)


def sanitize_url(url: str | httpx.URL, params: Mapping[str, Any] | None = None) -> str:
    """The URL a GET with `params` would hit, with credential values redacted."""
    try:
        full = httpx.URL(url)
        if params:
            full = full.copy_merge_params(dict(params))
    except httpx.InvalidURL:
        return sanitize_text(str(url))
    return sanitize_text(str(full))


def sanitize_for_logging(value: Any) -> Any:
    """Redact credential-named keys and embedded secrets in nested log payloads."""
    if isinstance(value, Mapping):
        return {
            key: REDACTED if is_sensitive_name(key) else sanitize_for_logging(child)
            for key, child in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_for_logging(item) for item in value)
    if isinstance(value, str):
        return sanitize_text(value)
    return value
