"""AES-CTR encryption of serialized recorder payloads.

The initial counter block is the integer 5 encoded big-endian over 16
bytes and ciphertext is lowercase hex, so payloads stay readable by the
browser client that shares the remote store.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from jsonlww.exceptions import SyncCryptoError

_INITIAL_COUNTER = (5).to_bytes(16, "big")


def _cipher(key: bytes) -> Cipher[modes.CTR]:
    if len(key) not in (16, 24, 32):
        raise SyncCryptoError(f"AES key must be 16, 24 or 32 bytes (got {len(key)})")
    return Cipher(algorithms.AES(key), modes.CTR(_INITIAL_COUNTER))


def aes_ctr_encrypt_hex(plaintext: str, key: bytes) -> str:
    """Encrypt a UTF-8 string, returning lowercase hex.

    Raises
    ------
    SyncCryptoError
        If encryption fails.
    """
    try:
        encryptor = _cipher(key).encryptor()
        ct = encryptor.update(plaintext.encode("utf-8")) + encryptor.finalize()
        return ct.hex()
    except SyncCryptoError:
        raise
    except Exception as exc:
        raise SyncCryptoError(f"AES encryption failed: {exc}") from exc


def aes_ctr_decrypt_hex(cipher_hex: str, key: bytes) -> str:
    """Decrypt hex ciphertext back to a UTF-8 string.

    CTR has no padding or authentication, so a wrong key surfaces as
    undecodable UTF-8 (or later as unparsable JSON).

    Raises
    ------
    SyncCryptoError
        If the input is not hex or the plaintext is not UTF-8.
    """
    text = cipher_hex.strip()
    try:
        ct = bytes.fromhex(text)
    except ValueError as exc:
        raise SyncCryptoError("AES ciphertext must be hex-encoded") from exc
    try:
        decryptor = _cipher(key).decryptor()
        plaintext = decryptor.update(ct) + decryptor.finalize()
        return plaintext.decode("utf-8")
    except SyncCryptoError:
        raise
    except Exception as exc:
        raise SyncCryptoError(f"AES decryption failed: {exc}") from exc
