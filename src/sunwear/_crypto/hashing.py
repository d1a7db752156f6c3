"""Pairing key derivation."""

from __future__ import annotations

import hashlib


def derive_pairing_key(passphrase: str) -> str:
    """Derive a 32-byte hex AES key from a human pairing passphrase.

    Both devices run the same derivation, so typing the same passphrase on
    the phone and the watch yields the same key.

    Parameters
    ----------
    passphrase : str
        Shared passphrase. Surrounding whitespace is ignored.

    Returns
    -------
    str
        64-character uppercase hex key.
    """
    return hashlib.sha256(passphrase.strip().encode("utf-8")).hexdigest().upper()
