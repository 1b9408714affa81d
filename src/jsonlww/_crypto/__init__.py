"""Cryptographic primitives for the optional payload encryption stage."""

from __future__ import annotations

from jsonlww._crypto.aes import aes_ctr_decrypt_hex, aes_ctr_encrypt_hex
from jsonlww._crypto.hashing import sha256_hex
from jsonlww._crypto.kdf import derive_key

__all__ = [
    "aes_ctr_decrypt_hex",
    "aes_ctr_encrypt_hex",
    "derive_key",
    "sha256_hex",
]
