"""Sync configuration for jsonlww."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from jsonlww.exceptions import SyncConfigError

#: Digests accepted for PBKDF2 key derivation.
SUPPORTED_DIGESTS: frozenset[str] = frozenset({"sha1", "sha224", "sha256", "sha384", "sha512"})


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(env: Any, key: str) -> int | None:
    raw = env.get(key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise SyncConfigError(f"{key} must be an integer (got {raw!r})") from exc


@dataclasses.dataclass(frozen=True)
class EncryptConfig:
    """Password based encryption of the serialized blob.

    Parameters
    ----------
    enabled : bool
        When ``False`` the payload codec is the identity transform.
    password : str
        Passphrase fed to PBKDF2.
    salt : str
        PBKDF2 salt (UTF-8).
    iterations : int
        PBKDF2 iteration count.
    keylen : int
        Derived AES key length in bytes (16, 24 or 32).
    digest : str
        PBKDF2 HMAC digest name.
    """

    enabled: bool = False
    password: str = ""
    salt: str = ""
    iterations: int = 1
    keylen: int = 256 // 8
    digest: str = "sha512"

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise SyncConfigError(f"iterations must be >= 1 (got {self.iterations})")
        if self.keylen not in (16, 24, 32):
            raise SyncConfigError(f"keylen must be 16, 24 or 32 bytes (got {self.keylen})")
        if self.digest.lower() not in SUPPORTED_DIGESTS:
            allowed = ", ".join(sorted(SUPPORTED_DIGESTS))
            raise SyncConfigError(f"digest must be one of {allowed} (got {self.digest!r})")
        if self.enabled and not self.password:
            raise SyncConfigError("password is required when encryption is enabled")


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Sync session configuration.

    Parameters
    ----------
    key : str
        Key under which the serialized recorder is stored remotely.
    verify_upload : bool
        Read the blob back after every upload and compare SHA-256 digests.
    encrypt : EncryptConfig
        Optional payload encryption.
    """

    key: str = "jsonlww-backup"
    verify_upload: bool = True
    encrypt: EncryptConfig = dataclasses.field(default_factory=EncryptConfig)

    def __post_init__(self) -> None:
        if not self.key.strip():
            raise SyncConfigError("key must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from ``JSONLWW_*`` environment variables.

        Explicit keyword arguments override environment values.  ``encrypt``
        may be given as an :class:`EncryptConfig` or as a dict of its fields.

        Returns
        -------
        SyncConfig
            Populated configuration.

        Raises
        ------
        SyncConfigError
            If a variable cannot be converted or the result is invalid.
        """
        env = os.environ

        encrypt_kwargs: dict[str, Any] = {}
        _ENV_ENCRYPT_MAP = {
            "JSONLWW_ENCRYPT_PASSWORD": "password",
            "JSONLWW_ENCRYPT_SALT": "salt",
            "JSONLWW_ENCRYPT_DIGEST": "digest",
        }
        for env_key, field_name in _ENV_ENCRYPT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                encrypt_kwargs[field_name] = val
        if "JSONLWW_ENCRYPT_ENABLED" in env:
            encrypt_kwargs["enabled"] = _env_bool(env.get("JSONLWW_ENCRYPT_ENABLED"), False)
        for env_key, field_name in (
            ("JSONLWW_ENCRYPT_ITERATIONS", "iterations"),
            ("JSONLWW_ENCRYPT_KEYLEN", "keylen"),
        ):
            number = _env_int(env, env_key)
            if number is not None:
                encrypt_kwargs[field_name] = number

        encrypt_overrides = overrides.pop("encrypt", None)
        if isinstance(encrypt_overrides, dict):
            encrypt_kwargs.update(encrypt_overrides)
        elif isinstance(encrypt_overrides, EncryptConfig):
            encrypt_kwargs = dataclasses.asdict(encrypt_overrides)

        config_kwargs: dict[str, Any] = {"encrypt": EncryptConfig(**encrypt_kwargs)}

        key_env = env.get("JSONLWW_SYNC_KEY")
        if key_env is not None:
            config_kwargs["key"] = key_env

        if "verify_upload" not in overrides:
            config_kwargs["verify_upload"] = _env_bool(env.get("JSONLWW_VERIFY_UPLOAD"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
