"""JSON value model.

Values are plain Python JSON types (``None``, ``bool``, ``int``, ``float``,
``str``, ``list`` and ``dict`` with string keys).  Every consumer in this
package dispatches over exactly these types; anything else is rejected by
:func:`ensure_json_value` at the boundary.
"""

from __future__ import annotations

import copy
import math
from typing import Any, TypeAlias

from jsonlww.exceptions import InvalidJsonValue

JsonPrimitive: TypeAlias = None | bool | int | float | str
JsonValue: TypeAlias = JsonPrimitive | list["JsonValue"] | dict[str, "JsonValue"]

# Deeply nested documents are almost certainly cyclic.
_MAX_DEPTH = 512


def is_primitive(value: Any) -> bool:
    """Return ``True`` for ``null``, booleans, numbers and strings."""
    return value is None or isinstance(value, (bool, int, float, str))


def is_container(value: Any) -> bool:
    """Return ``True`` for arrays and objects."""
    return isinstance(value, (list, dict))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def json_equal(a: Any, b: Any) -> bool:
    """Deep structural equality with JSON semantics.

    Unlike ``==`` this keeps booleans apart from numbers (``True`` is not
    ``1``).  Integers and floats compare by numeric value, object key order
    is ignored and array order is significant.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    if _is_number(a) or _is_number(b):
        return _is_number(a) and _is_number(b) and a == b
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return False
        return all(json_equal(x, y) for x, y in zip(a, b, strict=True))
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(json_equal(a[key], b[key]) for key in a)
    return False


def ensure_json_value(value: Any, *, _depth: int = 0) -> None:
    """Raise :class:`InvalidJsonValue` unless *value* is a JSON value."""
    if _depth > _MAX_DEPTH:
        raise InvalidJsonValue(f"value nested deeper than {_MAX_DEPTH} levels")
    if value is None or isinstance(value, (bool, int, str)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidJsonValue(f"non-finite number {value!r} is not valid JSON")
        return
    if isinstance(value, list):
        for item in value:
            ensure_json_value(item, _depth=_depth + 1)
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise InvalidJsonValue(f"object keys must be strings (got {type(key).__name__})")
            ensure_json_value(item, _depth=_depth + 1)
        return
    raise InvalidJsonValue(f"{type(value).__name__} is not a JSON value")


def clone(value: JsonValue) -> JsonValue:
    """Deep copy so callers never alias recorder state."""
    return copy.deepcopy(value)


def empty_like(value: JsonValue) -> JsonValue:
    """Empty container of the same kind as *value* (``{}`` for primitives)."""
    if isinstance(value, list):
        return []
    return {}
