"""Path-granular last-write-wins recorder.

A :class:`Recorder` owns one JSON value and a timestamp index mapping every
path it has ever observed to the time of the last operation that touched it.
Two recorders forked from a common ancestor and mutated independently can be
reconciled with :meth:`Recorder.merge`, which keeps the most recent change
per path instead of per document.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from typing import Any

from pydantic import ValidationError

from jsonlww.exceptions import MalformedInput
from jsonlww.recorder.diff import ChangeSet, Delete, diff
from jsonlww.recorder.models import RecorderSnapshot, TimestampEntry
from jsonlww.recorder.path import (
    MISSING,
    JsonPath,
    as_path,
    child_path,
    delete_at_path,
    find_blocking_ancestor,
    format_path,
    get_at_path,
    parse_path,
    set_at_path,
    walk_paths,
)
from jsonlww.recorder.value import JsonValue, clone, ensure_json_value, is_container

_logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _merge_order(item: tuple[JsonPath, TimestampEntry]) -> tuple[int, int, int]:
    # Parents before children. Within one depth, array deletions come last and
    # from the highest index down, so each splice leaves the remaining indices valid.
    path, entry = item
    if entry.deleted and path and isinstance(path[-1], int):
        return (len(path), 1, -path[-1])
    return (len(path), 0, 0)


class Recorder:
    """A JSON document plus its per-path modification history.

    Parameters
    ----------
    value : JsonValue
        Initial document.  It is copied; later changes to the caller's
        object are not seen by the recorder.
    clock : callable
        Returns the current time in epoch milliseconds.  Every operation
        reads it once, so all paths touched by one ``update`` share the same
        timestamp.

    Notes
    -----
    Recorders are not thread-safe.  Callers sharing one instance between
    threads must serialise ``update``/``merge``/``serialize`` themselves.
    """

    def __init__(self, value: JsonValue, *, clock: Clock = _now_ms) -> None:
        ensure_json_value(value)
        self._clock = clock
        self._value: JsonValue = clone(value)
        self._timestamps: dict[JsonPath, TimestampEntry] = {}
        self._stamp_untracked(self._clock())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(paths={len(self._timestamps)})"

    def __len__(self) -> int:
        return len(self._timestamps)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, tuple)):
            return False
        return as_path(path) in self._timestamps

    def _stamp_untracked(self, now: int) -> None:
        for path in walk_paths(self._value):
            if path not in self._timestamps:
                self._timestamps[path] = TimestampEntry(timestamp=now)

    # ------------------------------------------------------------------
    # Local changes
    # ------------------------------------------------------------------

    def update(self, value: JsonValue) -> None:
        """Replace the document, stamping every path that changed.

        Raises
        ------
        InvalidJsonValue
            If *value* is not a JSON value.
        InvalidPathOperation
            If a change cannot be written.  Neither the document nor the
            timestamp index is modified in that case.
        """
        ensure_json_value(value)
        changes = diff(self._value, value)
        now = self._clock()
        if changes:
            self._apply(changes, now)
            _logger.debug("Recorded %d change(s) at %d", len(changes), now)
        self._stamp_untracked(now)

    def _apply(self, changes: ChangeSet, now: int) -> None:
        # Changes are written to a copy so a failure leaves nothing half-applied.
        working = clone(self._value)
        for path, change in changes.items():
            if isinstance(change, Delete):
                delete_at_path(working, path)
            else:
                working = set_at_path(working, path, clone(change.value))

        self._value = working
        for path, change in changes.items():
            self._timestamps[path] = TimestampEntry(timestamp=now, deleted=isinstance(change, Delete))

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def merge(self, other: Recorder) -> None:
        """Pull every change from *other* that is strictly newer than ours.

        Paths are resolved independently.  On equal timestamps the local
        side is kept.  *other* is only read.

        Adopting a container over a container of the same kind keeps the
        local one: its children are settled by their own entries, and only
        children neither side has ever stamped are copied across.  Any other
        adopted live entry replaces the local node with other's subtree.

        An adopted entry whose location is unreachable here, because one of
        its ancestors holds a primitive that is at least as recent, updates
        the index but not the document.  The same applies to a live entry
        for which *other* holds no value.
        """
        working = clone(self._value)
        adopted: dict[JsonPath, TimestampEntry] = {}

        for path, entry in sorted(other._timestamps.items(), key=_merge_order):
            current = self._timestamps.get(path)
            if current is not None and current.timestamp >= entry.timestamp:
                continue
            adopted[path] = entry

            blocked = find_blocking_ancestor(working, path)
            if blocked is not None:
                _logger.debug(
                    "Adopted %r without value: %r is not traversable",
                    format_path(path),
                    format_path(blocked),
                )
                continue
            if entry.deleted:
                if path:
                    delete_at_path(working, path)
                continue
            incoming = get_at_path(other._value, path)
            if incoming is MISSING:
                continue
            existing = get_at_path(working, path)
            if is_container(existing) and type(existing) is type(incoming):
                # Children carry their own entries and are resolved on their own.
                self._graft_untracked(existing, incoming, path, other)
            else:
                working = set_at_path(working, path, clone(incoming))

        self._value = working
        self._timestamps.update(adopted)
        _logger.debug("Merged %d of %d entries", len(adopted), len(other._timestamps))

    def _graft_untracked(self, existing: Any, incoming: Any, path: JsonPath, other: Recorder) -> None:
        """Copy children of *incoming* that neither side has an entry for."""
        items = incoming.items() if isinstance(incoming, dict) else enumerate(incoming)
        for segment, item in items:
            child = child_path(path, segment)
            if child in other._timestamps or child in self._timestamps:
                continue
            set_at_path(existing, (segment,), clone(item))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self) -> str:
        """Encode the document and its timestamp index as one JSON string."""
        snapshot = RecorderSnapshot.model_construct(
            value=self._value,
            timestamps={format_path(path): entry for path, entry in self._timestamps.items()},
        )
        return snapshot.model_dump_json()

    @classmethod
    def deserialize(cls, blob: str | bytes, *, clock: Clock = _now_ms) -> Recorder:
        """Restore a recorder from :meth:`serialize` output.

        The document is re-stamped on construction, then the embedded
        timestamp index replaces the fresh one.

        Raises
        ------
        MalformedInput
            If *blob* is not JSON of the shape ``{"value", "timestamps"}``
            or holds invalid paths or timestamps.
        """
        try:
            snapshot = RecorderSnapshot.model_validate_json(blob)
        except ValidationError as exc:
            raise MalformedInput(f"Invalid recorder snapshot ({exc.error_count()} error(s)): {exc}") from exc

        recorder = cls(snapshot.value, clock=clock)
        recorder._timestamps = {parse_path(text): entry for text, entry in snapshot.timestamps.items()}
        return recorder

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_value(self) -> JsonValue:
        """Deep copy of the current document."""
        return clone(self._value)

    def get_value_at(self, path: str | JsonPath, default: Any = None) -> Any:
        """Deep copy of the node at *path*, or *default* if there is none."""
        node = get_at_path(self._value, as_path(path))
        if node is MISSING:
            return default
        return clone(node)

    def get_timestamp_entry(self, path: str | JsonPath) -> TimestampEntry | None:
        return self._timestamps.get(as_path(path))

    def get_timestamp(self, path: str | JsonPath) -> int | None:
        entry = self.get_timestamp_entry(path)
        return entry.timestamp if entry is not None else None

    def paths(self) -> Iterator[str]:
        """Canonical strings of every tracked path, live or deleted."""
        return (format_path(path) for path in self._timestamps)
