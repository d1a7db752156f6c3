from __future__ import annotations

import pytest

from sunwear._crypto import derive_pairing_key, open_sealed, seal
from sunwear._crypto.aes import validate_key
from sunwear.exceptions import SunwearCryptoError

_KEY = "00112233445566778899AABBCCDDEEFF"


def test_seal_round_trip() -> None:
    sealed = seal('{"fields": {"KEY_MAX_TEMP": "21°"}}', _KEY)

    assert sealed == sealed.upper()
    assert open_sealed(sealed, _KEY) == '{"fields": {"KEY_MAX_TEMP": "21°"}}'


def test_seal_uses_fresh_iv() -> None:
    assert seal("same", _KEY) != seal("same", _KEY)


def test_open_sealed_ignores_whitespace() -> None:
    sealed = seal("hello", _KEY)
    spaced = f" {sealed[:10]}\n{sealed[10:]} "

    assert open_sealed(spaced, _KEY) == "hello"


def test_open_sealed_with_wrong_key_fails() -> None:
    sealed = seal("hello", _KEY)

    with pytest.raises(SunwearCryptoError):
        open_sealed(sealed, "FF" * 16)


@pytest.mark.parametrize("sealed", ["", "ABC", "00" * 8, "ZZ" * 32])
def test_open_sealed_rejects_malformed_text(sealed: str) -> None:
    with pytest.raises(SunwearCryptoError):
        open_sealed(sealed, _KEY)


@pytest.mark.parametrize("key", ["", "0x", "ABC", "00" * 15, "GG" * 16])
def test_validate_key_rejects_bad_keys(key: str) -> None:
    with pytest.raises(SunwearCryptoError):
        validate_key(key)


def test_validate_key_accepts_prefixed_hex() -> None:
    assert len(validate_key("0x" + "AB" * 24)) == 24


def test_derive_pairing_key_is_stable_aes_key() -> None:
    key = derive_pairing_key("  correct horse  ")

    assert key == derive_pairing_key("correct horse")
    assert len(key) == 64
    assert len(validate_key(key)) == 32



def test_open_sealed_detects_tampering() -> None:
    sealed = seal('{"fields": {"KEY_MAX_TEMP": "21°"}}', _KEY)
    last = sealed[-1]
    tampered = sealed[:-1] + ("0" if last != "0" else "1")

    with pytest.raises(SunwearCryptoError, match="tag mismatch"):
        open_sealed(tampered, _KEY)
