"""AES-GCM sealing of item bodies with a shared pairing key.

Sealed text is uppercase hex of ``nonce || ciphertext || tag`` with a fresh
random nonce per message. A body altered in transit fails to open.
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sunwear.exceptions import SunwearCryptoError

_NONCE_BYTES = 12
_TAG_BYTES = 16


def _parse_hex_bytes(
    value: str,
    *,
    name: str,
    allowed_nbytes: set[int] | None = None,
) -> bytes:
    text = value.strip()
    if text.startswith("0x") or text.startswith("0X"):
        text = text[2:]
    if not text:
        raise SunwearCryptoError(f"{name} is empty")
    if len(text) % 2 != 0:
        raise SunwearCryptoError(f"{name} hex length must be even (got {len(text)})")
    try:
        data = bytes.fromhex(text)
    except ValueError as exc:
        raise SunwearCryptoError(f"{name} must be hex-encoded") from exc

    if allowed_nbytes is not None and len(data) not in allowed_nbytes:
        allowed = ", ".join(str(n) for n in sorted(allowed_nbytes))
        raise SunwearCryptoError(f"{name} must be {allowed} bytes (got {len(data)})")
    return data


def validate_key(key_hex: str) -> bytes:
    """Return the raw key bytes, raising :class:`SunwearCryptoError` if invalid."""
    return _parse_hex_bytes(key_hex, name="Pairing key", allowed_nbytes={16, 24, 32})


def seal(plaintext: str, key_hex: str) -> str:
    """Encrypt and authenticate *plaintext* with AES-GCM under *key_hex*.

    Parameters
    ----------
    plaintext : str
        UTF-8 string to encrypt.
    key_hex : str
        Hex key (16, 24 or 32 bytes).

    Returns
    -------
    str
        Uppercase hex of the random nonce followed by the ciphertext and tag.

    Raises
    ------
    SunwearCryptoError
        If the key is invalid or encryption fails.
    """
    key = validate_key(key_hex)
    try:
        nonce = os.urandom(_NONCE_BYTES)
        ct = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
        return (nonce + ct).hex().upper()
    except Exception as exc:
        raise SunwearCryptoError(f"AES encryption failed: {exc}") from exc


def open_sealed(sealed_hex: str, key_hex: str) -> str:
    """Decrypt and verify text produced by :func:`seal`.

    Raises
    ------
    SunwearCryptoError
        If the key is wrong, the text is malformed, or the body was altered.
    """
    key = validate_key(key_hex)
    blob = _parse_hex_bytes("".join(sealed_hex.split()), name="Sealed payload")
    if len(blob) < _NONCE_BYTES + _TAG_BYTES:
        raise SunwearCryptoError(f"Sealed payload has invalid length ({len(blob)} bytes)")
    nonce, ct = blob[:_NONCE_BYTES], blob[_NONCE_BYTES:]
    try:
        plaintext = AESGCM(key).decrypt(nonce, ct, None)
    except InvalidTag as exc:
        raise SunwearCryptoError("AES decryption failed: authentication tag mismatch") from exc
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SunwearCryptoError(f"AES decryption failed: {exc}") from exc
