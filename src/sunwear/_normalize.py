"""Normalization helpers.

Centralizes tolerant parsing of field values received from a peer.
"""

from __future__ import annotations

import math
from typing import Any


def safe_int(value: Any) -> int | None:
    """Parse an integer field, returning ``None`` for anything not integral."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None
    return None


def safe_str(value: Any) -> str | None:
    """Parse a string field. Non-strings are rejected rather than coerced."""
    if isinstance(value, str):
        return value
    return None
