"""Sync a recorder with a remote key/value store.

The store itself is a collaborator: anything exposing async ``get`` and
``set`` of strings satisfies :class:`BlobStore`.  The session serializes,
optionally encrypts, merges and verifies; it never retries.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Protocol

from jsonlww._crypto import sha256_hex
from jsonlww._redact import redact_for_log
from jsonlww.codec import decode_payload, encode_payload
from jsonlww.config import SyncConfig
from jsonlww.exceptions import JsonLwwError, SyncStoreError, SyncVerificationError
from jsonlww.recorder import Recorder

_logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Remote storage for serialized recorders."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryBlobStore:
    """In-process :class:`BlobStore`, for tests and local fallbacks."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._blobs.get(key)

    async def set(self, key: str, value: str) -> None:
        self._blobs[key] = value


class SyncSession:
    """Reconcile a local recorder with the copy held in a :class:`BlobStore`.

    Parameters
    ----------
    store : BlobStore
        Remote storage.
    config : SyncConfig
        Storage key, upload verification and encryption settings.
    """

    def __init__(self, store: BlobStore, config: SyncConfig | None = None) -> None:
        self._store = store
        self._config = config or SyncConfig()
        self.last_sync_time: float | None = None
        _logger.debug("Sync session created config=%s", redact_for_log(dataclasses.asdict(self._config)))

    @property
    def config(self) -> SyncConfig:
        return self._config

    async def _fetch(self) -> str | None:
        key = self._config.key
        try:
            blob = await self._store.get(key)
        except JsonLwwError:
            raise
        except Exception as exc:
            raise SyncStoreError(f"Failed to read {key!r}: {exc}", key=key) from exc
        return blob or None

    async def _fetch_remote(self) -> Recorder | None:
        blob = await self._fetch()
        if blob is None:
            return None
        return Recorder.deserialize(decode_payload(blob, self._config.encrypt))

    async def _upload(self, recorder: Recorder) -> None:
        key = self._config.key
        blob = encode_payload(recorder.serialize(), self._config.encrypt)
        try:
            await self._store.set(key, blob)
        except JsonLwwError:
            raise
        except Exception as exc:
            raise SyncStoreError(f"Failed to write {key!r}: {exc}", key=key) from exc

        if not self._config.verify_upload:
            return
        expected = sha256_hex(blob)
        stored = await self._fetch()
        if stored is None or sha256_hex(stored) != expected:
            raise SyncVerificationError(f"Uploaded payload for {key!r} does not match what was sent", key=key)
        _logger.debug("Upload verified key=%s sha256=%s", key, expected)

    def _mark_synced(self) -> None:
        self.last_sync_time = time.time()

    async def sync(self, local: Recorder) -> Recorder:
        """Merge the remote copy into *local* and upload the result.

        When the store holds nothing under the key, *local* is uploaded
        as is.  Returns *local*, which is modified in place.
        """
        remote = await self._fetch_remote()
        if remote is None:
            _logger.debug("Remote state is empty, uploading local state")
        else:
            local.merge(remote)
        await self._upload(local)
        self._mark_synced()
        return local

    async def override_remote(self, local: Recorder) -> None:
        """Replace the remote copy with *local*, without merging."""
        await self._upload(local)
        self._mark_synced()

    async def override_local(self) -> Recorder | None:
        """Return the remote copy, or ``None`` if the store is empty."""
        remote = await self._fetch_remote()
        if remote is None:
            _logger.debug("Remote state is empty, keeping local state")
            return None
        self._mark_synced()
        return remote
