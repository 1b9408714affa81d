"""PBKDF2 key derivation for payload encryption."""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from jsonlww.exceptions import SyncCryptoError

_DIGESTS: dict[str, type[hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


def derive_key(password: str, salt: str, *, iterations: int, keylen: int, digest: str) -> bytes:
    """Derive an AES key with PBKDF2-HMAC.

    Password and salt are UTF-8 encoded, matching blobs written by the
    browser client.

    Raises
    ------
    SyncCryptoError
        If the digest is unknown or derivation fails.
    """
    algorithm = _DIGESTS.get(digest.lower())
    if algorithm is None:
        raise SyncCryptoError(f"Unsupported PBKDF2 digest {digest!r}")
    try:
        kdf = PBKDF2HMAC(
            algorithm=algorithm(),
            length=keylen,
            salt=salt.encode("utf-8"),
            iterations=iterations,
        )
        return kdf.derive(password.encode("utf-8"))
    except Exception as exc:
        raise SyncCryptoError(f"Key derivation failed: {exc}") from exc
