"""Payload sealing for items that travel through a shared broker."""

from __future__ import annotations

from sunwear._crypto.aes import open_sealed, seal
from sunwear._crypto.hashing import derive_pairing_key

__all__ = [
    "derive_pairing_key",
    "open_sealed",
    "seal",
]
