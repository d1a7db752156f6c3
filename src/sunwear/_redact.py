"""Helpers for safe debug logging of configuration.

Configuration carries broker credentials and the pairing key; those are
masked before a config dump reaches DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_CONFIG_KEYS: frozenset[str] = frozenset({"broker_username", "broker_password", "pairing_key"})


def redact_for_log(values: Mapping[str, Any], *, max_string: int = 128) -> dict[str, Any]:
    """Return a copy of a flat config mapping suitable for debug logs.

    Unset secrets stay ``None`` so the log still shows whether one was given.
    """
    redacted: dict[str, Any] = {}
    for key, value in values.items():
        if key in _SENSITIVE_CONFIG_KEYS and value is not None:
            redacted[key] = "<redacted>"
        elif isinstance(value, str) and len(value) > max_string:
            redacted[key] = f"{value[:max_string]}…<truncated>"
        else:
            redacted[key] = value
    return redacted
