"""Custom exception hierarchy for jsonlww."""

from __future__ import annotations


class JsonLwwError(Exception):
    """Base exception for all jsonlww errors."""


class InvalidJsonValue(JsonLwwError, TypeError):
    """Value is not representable as JSON (non-string key, NaN, set, ...)."""


class InvalidPath(JsonLwwError, ValueError):
    """Path string could not be parsed."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class InvalidPathOperation(JsonLwwError):
    """Set/delete would have to traverse through a primitive value.

    For example writing ``a.b`` while ``a`` currently holds a number.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class MalformedInput(JsonLwwError):
    """Serialized recorder blob does not have the expected shape."""


class SyncConfigError(JsonLwwError):
    """Invalid or missing sync configuration."""


class SyncCryptoError(JsonLwwError):
    """Encryption or decryption of a sync payload failed."""


class SyncStoreError(JsonLwwError):
    """The blob store failed to read or write a payload."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class SyncVerificationError(SyncStoreError):
    """Uploaded payload read back from the store does not match.

    Raised when the SHA-256 digest of the blob fetched right after an
    upload differs from the digest of the blob that was sent.
    """
