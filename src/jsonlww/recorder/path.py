"""Path addressing inside a JSON value tree.

Paths are kept structured internally as a tuple of segments: ``str`` for an
object key and ``int`` for an array index.  ``()`` is the document root.
The canonical string form is only produced at the serialization boundary:

* object child: ``key`` at the root, ``parent.key`` below it
* array child: ``parent[1]``
* keys that are empty or contain ``.``, ``[`` or ``]`` are written as a
  quoted bracket segment, ``parent["a.b"]``

so that :func:`parse_path` always recovers the traversal that produced a
string.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from typing import Any, Final, TypeAlias

from jsonlww.exceptions import InvalidPath, InvalidPathOperation
from jsonlww.recorder.value import JsonValue

Segment: TypeAlias = str | int
JsonPath: TypeAlias = tuple[Segment, ...]

ROOT: Final[JsonPath] = ()

_PLAIN_KEY_RE = re.compile(r"[^.\[\]]+")
_INDEX_RE = re.compile(r"\[(\d+)\]")
_NEEDS_QUOTING = frozenset(".[]")
_DECODER = json.JSONDecoder()


class _Missing:
    """Marker for a location that does not exist in a value tree."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


def child_path(parent: JsonPath, segment: Segment) -> JsonPath:
    return (*parent, segment)


def _format_key(key: str, *, first: bool) -> str:
    if not key or any(ch in _NEEDS_QUOTING for ch in key):
        return f"[{json.dumps(key, ensure_ascii=False)}]"
    return key if first else f".{key}"


def format_path(path: JsonPath) -> str:
    """Canonical string for *path* (``""`` for the root)."""
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        else:
            parts.append(_format_key(segment, first=not parts))
    return "".join(parts)


def parse_path(text: str) -> JsonPath:
    """Parse a canonical path string back into segments.

    Raises
    ------
    InvalidPath
        If *text* is not a well-formed path.
    """
    segments: list[Segment] = []
    pos = 0
    end = len(text)
    while pos < end:
        ch = text[pos]
        if ch == "[":
            if text.startswith('"', pos + 1):
                try:
                    key, close = _DECODER.raw_decode(text, pos + 1)
                except json.JSONDecodeError as exc:
                    raise InvalidPath(f"bad quoted key in path {text!r}", path=text) from exc
                if not text.startswith("]", close):
                    raise InvalidPath(f"unterminated quoted key in path {text!r}", path=text)
                segments.append(key)
                pos = close + 1
                continue
            match = _INDEX_RE.match(text, pos)
            if match is None:
                raise InvalidPath(f"bad array index at offset {pos} in path {text!r}", path=text)
            segments.append(int(match.group(1)))
            pos = match.end()
        elif ch == ".":
            if not segments:
                raise InvalidPath(f"path {text!r} starts with '.'", path=text)
            match = _PLAIN_KEY_RE.match(text, pos + 1)
            if match is None:
                raise InvalidPath(f"empty key at offset {pos} in path {text!r}", path=text)
            segments.append(match.group(0))
            pos = match.end()
        else:
            if segments:
                raise InvalidPath(f"expected '.' or '[' at offset {pos} in path {text!r}", path=text)
            match = _PLAIN_KEY_RE.match(text, pos)
            if match is None:
                raise InvalidPath(f"unexpected {ch!r} at offset {pos} in path {text!r}", path=text)
            segments.append(match.group(0))
            pos = match.end()
    return tuple(segments)


def as_path(path: str | JsonPath) -> JsonPath:
    """Accept either a canonical string or an already structured path."""
    if isinstance(path, str):
        return parse_path(path)
    return tuple(path)


def walk_paths(value: JsonValue, prefix: JsonPath = ROOT) -> Iterator[JsonPath]:
    """Yield *prefix* and the path of every location reachable below it."""
    yield prefix
    if isinstance(value, dict):
        for key, item in value.items():
            yield from walk_paths(item, child_path(prefix, key))
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from walk_paths(item, child_path(prefix, index))


def _step(node: Any, segment: Segment) -> Any:
    if isinstance(segment, int):
        if isinstance(node, list) and segment < len(node):
            return node[segment]
        return MISSING
    if isinstance(node, dict):
        return node.get(segment, MISSING)
    return MISSING


def _can_hold(node: Any, segment: Segment) -> bool:
    if isinstance(segment, int):
        return isinstance(node, list)
    return isinstance(node, dict)


def get_at_path(root: JsonValue, path: JsonPath) -> Any:
    """Return the node at *path*, or :data:`MISSING` if there is none."""
    node: Any = root
    for segment in path:
        node = _step(node, segment)
        if node is MISSING:
            return MISSING
    return node


def find_blocking_ancestor(root: JsonValue, path: JsonPath) -> JsonPath | None:
    """Return the prefix of *path* whose node cannot be traversed.

    A node blocks traversal when it is a primitive, or a container of the
    wrong kind for the next segment (an index into an object, a key into an
    array).  Missing intermediate nodes do not block; ``None`` means every
    existing ancestor can be traversed.
    """
    node: Any = root
    for depth, segment in enumerate(path):
        if node is MISSING:
            return None
        if not _can_hold(node, segment):
            return path[:depth]
        node = _step(node, segment)
    return None


def _raise_blocked(op: str, path: JsonPath, blocked: JsonPath, node: Any) -> None:
    kind = type(node).__name__
    raise InvalidPathOperation(
        f"cannot {op} {format_path(path)!r}: {format_path(blocked)!r} holds a {kind}",
        path=format_path(path),
    )


def set_at_path(root: JsonValue, path: JsonPath, value: JsonValue) -> JsonValue:
    """Write *value* at *path* in place and return the (possibly new) root.

    Missing intermediate containers are created (an array when the next
    segment is an index, an object otherwise) and arrays are padded with
    ``null`` when writing past their end.

    Raises
    ------
    InvalidPathOperation
        If an existing ancestor is a primitive or the wrong kind of
        container.
    """
    if not path:
        return value
    blocked = find_blocking_ancestor(root, path)
    if blocked is not None:
        _raise_blocked("set", path, blocked, get_at_path(root, blocked))

    node: Any = root
    for segment, following in zip(path, path[1:], strict=False):
        child = _step(node, segment)
        if child is MISSING:
            child = [] if isinstance(following, int) else {}
            _assign(node, segment, child)
        node = child
    _assign(node, path[-1], value)
    return root


def _assign(node: Any, segment: Segment, value: Any) -> None:
    if isinstance(segment, int):
        if segment >= len(node):
            node.extend([None] * (segment + 1 - len(node)))
        node[segment] = value
    else:
        node[segment] = value


def delete_at_path(root: JsonValue, path: JsonPath) -> None:
    """Remove the node at *path* in place.

    Object keys are removed and array items are spliced out.  A location
    that does not exist is left alone, including a key below an array or an
    index below an object.

    Raises
    ------
    InvalidPathOperation
        For the root path, or if an existing ancestor is a primitive.
    """
    if not path:
        raise InvalidPathOperation("cannot delete the document root", path="")
    blocked = find_blocking_ancestor(root, path)
    if blocked is not None:
        node = get_at_path(root, blocked)
        if isinstance(node, (dict, list)):
            return
        _raise_blocked("delete", path, blocked, node)

    parent = get_at_path(root, path[:-1])
    if parent is MISSING:
        return
    segment = path[-1]
    if isinstance(segment, int):
        if segment < len(parent):
            del parent[segment]
    else:
        parent.pop(segment, None)
