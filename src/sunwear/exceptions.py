"""Custom exception hierarchy for sunwear."""

from __future__ import annotations


class SunwearError(Exception):
    """Base exception for all sunwear errors."""


class SunwearConfigError(SunwearError):
    """Invalid or missing configuration."""


class SunwearCryptoError(SunwearError):
    """Payload sealing or unsealing failure."""


class SunwearStoreError(SunwearError):
    """Local weather store could not be opened or queried."""


class SyncError(SunwearError):
    """Sync channel failure (connect, put or delivery)."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class SyncNotConnectedError(SyncError):
    """Operation attempted while the channel is not connected.

    ``put`` and listener delivery are only valid after the connect
    handshake has completed.
    """


class SyncPublishError(SyncError):
    """A ``put`` completed with a failure status or never completed."""
