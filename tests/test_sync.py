from __future__ import annotations

import pytest

from jsonlww.config import EncryptConfig, SyncConfig
from jsonlww.exceptions import MalformedInput, SyncStoreError, SyncVerificationError
from jsonlww.recorder import Recorder
from jsonlww.sync import MemoryBlobStore, SyncSession

KEY = "jsonlww-backup"


class _Clock:
    def __init__(self, start: int = 5_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def tick(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


class _TamperingStore(MemoryBlobStore):
    """Stores something other than what it was given."""

    async def set(self, key: str, value: str) -> None:
        await super().set(key, value + " ")


class _BrokenStore:
    async def get(self, key: str) -> str | None:
        raise RuntimeError("connection reset")

    async def set(self, key: str, value: str) -> None:
        raise RuntimeError("connection reset")


@pytest.mark.asyncio
async def test_sync_uploads_local_when_remote_is_empty() -> None:
    store = MemoryBlobStore()
    session = SyncSession(store)
    local = Recorder({"todo": ["milk"]})

    result = await session.sync(local)

    assert result is local
    assert session.last_sync_time is not None
    stored = await store.get(KEY)
    assert stored is not None
    assert Recorder.deserialize(stored).get_value() == {"todo": ["milk"]}


@pytest.mark.asyncio
async def test_sync_merges_remote_and_uploads_merged_state() -> None:
    clock = _Clock()
    base = Recorder({"a": 1, "b": 1}, clock=clock)
    remote = Recorder.deserialize(base.serialize(), clock=clock)
    local = Recorder.deserialize(base.serialize(), clock=clock)

    clock.tick()
    remote.update({"a": 2, "b": 1})
    clock.tick()
    local.update({"a": 1, "b": 3})

    store = MemoryBlobStore({KEY: remote.serialize()})
    session = SyncSession(store)

    await session.sync(local)

    assert local.get_value() == {"a": 2, "b": 3}
    stored = await store.get(KEY)
    assert stored is not None
    assert Recorder.deserialize(stored).get_value() == {"a": 2, "b": 3}


@pytest.mark.asyncio
async def test_sync_with_encryption() -> None:
    config = SyncConfig(encrypt=EncryptConfig(enabled=True, password="pw", salt="s"))
    store = MemoryBlobStore()
    session = SyncSession(store, config)

    await session.sync(Recorder({"secret": "value"}))

    stored = await store.get(KEY)
    assert stored is not None
    assert "secret" not in stored
    with pytest.raises(MalformedInput):
        await SyncSession(store).override_local()

    restored = await session.override_local()
    assert restored is not None
    assert restored.get_value() == {"secret": "value"}


@pytest.mark.asyncio
async def test_override_remote_skips_merge() -> None:
    clock = _Clock()
    remote = Recorder({"a": 1}, clock=clock)
    clock.tick(10)
    remote.update({"a": 99})
    store = MemoryBlobStore({KEY: remote.serialize()})
    session = SyncSession(store)

    await session.override_remote(Recorder({"a": 1}, clock=_Clock(0)))

    stored = await store.get(KEY)
    assert stored is not None
    assert Recorder.deserialize(stored).get_value() == {"a": 1}


@pytest.mark.asyncio
async def test_override_local() -> None:
    session = SyncSession(MemoryBlobStore())
    assert await session.override_local() is None
    assert session.last_sync_time is None

    remote = Recorder({"x": [1, 2]})
    session = SyncSession(MemoryBlobStore({KEY: remote.serialize()}))
    restored = await session.override_local()

    assert restored is not None
    assert restored.get_value() == {"x": [1, 2]}
    assert restored.get_timestamp("x[1]") == remote.get_timestamp("x[1]")
    assert session.last_sync_time is not None


@pytest.mark.asyncio
async def test_custom_key() -> None:
    store = MemoryBlobStore()
    await SyncSession(store, SyncConfig(key="other")).override_remote(Recorder(1))

    assert await store.get(KEY) is None
    assert await store.get("other") is not None


@pytest.mark.asyncio
async def test_upload_verification_failure() -> None:
    session = SyncSession(_TamperingStore())

    with pytest.raises(SyncVerificationError) as exc_info:
        await session.sync(Recorder({"a": 1}))

    assert exc_info.value.key == KEY
    assert session.last_sync_time is None


@pytest.mark.asyncio
async def test_upload_verification_can_be_disabled() -> None:
    store = _TamperingStore()
    session = SyncSession(store, SyncConfig(verify_upload=False))

    await session.sync(Recorder({"a": 1}))

    assert session.last_sync_time is not None


@pytest.mark.asyncio
async def test_store_errors_are_wrapped() -> None:
    session = SyncSession(_BrokenStore())

    with pytest.raises(SyncStoreError) as exc_info:
        await session.sync(Recorder({"a": 1}))
    assert isinstance(exc_info.value.__cause__, RuntimeError)

    with pytest.raises(SyncStoreError):
        await session.override_remote(Recorder({"a": 1}))


@pytest.mark.asyncio
async def test_malformed_remote_is_reported() -> None:
    session = SyncSession(MemoryBlobStore({KEY: '{"value": 1}'}))
    local = Recorder({"a": 1})

    with pytest.raises(MalformedInput):
        await session.sync(local)
    assert local.get_value() == {"a": 1}
