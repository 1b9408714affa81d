"""Structural diff between two JSON values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from jsonlww.recorder.path import ROOT, JsonPath, child_path
from jsonlww.recorder.value import JsonValue, empty_like, json_equal


@dataclass(frozen=True, slots=True)
class Update:
    """Replace the node at a path with ``value``."""

    value: JsonValue


@dataclass(frozen=True, slots=True)
class Delete:
    """Remove the node at a path."""


Change: TypeAlias = Update | Delete
ChangeSet: TypeAlias = dict[JsonPath, Change]


def _children(value: Any) -> dict[str | int, Any]:
    if isinstance(value, dict):
        return dict(value)
    return dict(enumerate(value))


def diff(
    old: JsonValue,
    new: JsonValue,
    path: JsonPath = ROOT,
    changes: ChangeSet | None = None,
) -> ChangeSet:
    """Compute the per-path changes turning *old* into *new*.

    Every path on the way to a changed leaf gets an :class:`Update` carrying
    its whole new subtree, parents before children, so ancestor timestamps
    move together with their descendants.  Subtrees that only exist in
    *new* are stamped all the way down.  Removed subtrees get a single
    :class:`Delete` at the point of removal; their descendants are not
    visited.
    """
    if changes is None:
        changes = {}
    if json_equal(old, new):
        return changes

    changes[path] = Update(new)

    if not isinstance(old, (dict, list)) or not isinstance(new, (dict, list)):
        return changes

    if type(old) is not type(new):
        # object <-> array: nothing survives, every child is replaced
        old_children: dict[str | int, Any] = {}
        for segment in _children(old):
            changes[child_path(path, segment)] = Delete()
    else:
        old_children = _children(old)
    new_children = _children(new)

    for segment in {**old_children, **new_children}:
        current = child_path(path, segment)
        if segment not in new_children:
            changes[current] = Delete()
        elif segment not in old_children:
            item = new_children[segment]
            changes[current] = Update(item)
            diff(empty_like(item), item, current, changes)
        elif not json_equal(old_children[segment], new_children[segment]):
            diff(old_children[segment], new_children[segment], current, changes)
    return changes
