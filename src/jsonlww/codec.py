"""Optional encryption stage between a serialized recorder and the store."""

from __future__ import annotations

import json
import logging

from jsonlww._crypto import aes_ctr_decrypt_hex, aes_ctr_encrypt_hex, derive_key
from jsonlww.config import EncryptConfig
from jsonlww.exceptions import MalformedInput

_logger = logging.getLogger(__name__)


def _key(encrypt: EncryptConfig) -> bytes:
    return derive_key(
        encrypt.password,
        encrypt.salt,
        iterations=encrypt.iterations,
        keylen=encrypt.keylen,
        digest=encrypt.digest,
    )


def _is_json_object(text: str) -> bool:
    # Hex ciphertext can itself be valid JSON (all digits), an object cannot.
    try:
        return isinstance(json.loads(text), dict)
    except ValueError:
        return False


def encode_payload(text: str, encrypt: EncryptConfig | None = None) -> str:
    """Encrypt *text* when encryption is enabled, otherwise return it as is."""
    if encrypt is None or not encrypt.enabled:
        return text
    return aes_ctr_encrypt_hex(text, _key(encrypt))


def decode_payload(blob: str, encrypt: EncryptConfig | None = None) -> str:
    """Reverse :func:`encode_payload`.

    A blob that already parses as a JSON object is returned unchanged, so plain
    backups stay readable after encryption has been switched on.

    Raises
    ------
    MalformedInput
        If the blob is neither a JSON object nor decryptable with *encrypt*.
    SyncCryptoError
        If decryption fails.
    """
    if _is_json_object(blob):
        return blob
    if encrypt is None or not encrypt.enabled:
        raise MalformedInput("Payload is not a JSON object and encryption is disabled")

    _logger.debug("Decrypting %d byte payload", len(blob))
    plaintext = aes_ctr_decrypt_hex(blob, _key(encrypt))
    if not _is_json_object(plaintext):
        raise MalformedInput("Decrypted payload is not a JSON object (wrong password?)")
    return plaintext
