"""Digests used to verify uploaded payloads."""

from __future__ import annotations

import hashlib


def sha256_hex(value: str) -> str:
    """SHA-256 of a UTF-8 string as lowercase hex."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
