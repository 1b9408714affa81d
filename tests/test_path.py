from __future__ import annotations

import pytest

from jsonlww.exceptions import InvalidPath, InvalidPathOperation
from jsonlww.recorder.path import (
    MISSING,
    delete_at_path,
    find_blocking_ancestor,
    format_path,
    get_at_path,
    parse_path,
    set_at_path,
    walk_paths,
)


@pytest.mark.parametrize(
    ("path", "text"),
    [
        ((), ""),
        (("a",), "a"),
        (("c", "d"), "c.d"),
        (("c", 1), "c[1]"),
        ((1, "id"), "[1].id"),
        (("a", 0, 2, "b"), "a[0][2].b"),
        (("0",), "0"),
        (("a", "0"), "a.0"),
    ],
)
def test_format_and_parse_plain_paths(path: tuple[str | int, ...], text: str) -> None:
    assert format_path(path) == text
    assert parse_path(text) == path


@pytest.mark.parametrize(
    "path",
    [
        ("a.b",),
        ("x", "a.b", "c"),
        ("",),
        ("list[0]",),
        ("we]ird", 3),
        ('"quoted"',),
    ],
)
def test_keys_with_path_syntax_are_quoted_and_recovered(path: tuple[str | int, ...]) -> None:
    text = format_path(path)
    assert parse_path(text) == path


def test_quoted_key_format() -> None:
    assert format_path(("a", "b.c")) == 'a["b.c"]'
    assert format_path(("b.c",)) == '["b.c"]'


@pytest.mark.parametrize("text", [".a", "a..b", "a[", "a[x]", "a[-1]", "a]", 'a["b"', '["b"x', "[0]b"])
def test_parse_rejects_malformed_paths(text: str) -> None:
    with pytest.raises(InvalidPath):
        parse_path(text)


def test_get_at_path_returns_missing_for_absent_locations() -> None:
    doc = {"a": [{"b": 1}]}
    assert get_at_path(doc, ("a", 0, "b")) == 1
    assert get_at_path(doc, ("a", 1)) is MISSING
    assert get_at_path(doc, ("a", "0")) is MISSING
    assert get_at_path(doc, ("a", 0, "b", "c")) is MISSING
    assert get_at_path(doc, ()) is doc


def test_set_at_path_creates_intermediate_containers() -> None:
    doc: dict = {}
    root = set_at_path(doc, ("a", 2, "b"), 5)
    assert root is doc
    assert doc == {"a": [None, None, {"b": 5}]}


def test_set_at_root_returns_new_value() -> None:
    assert set_at_path(3, (), {"a": 1}) == {"a": 1}


def test_set_through_primitive_raises() -> None:
    doc = {"a": 5}
    with pytest.raises(InvalidPathOperation) as excinfo:
        set_at_path(doc, ("a", "b"), 1)
    assert excinfo.value.path == "a.b"
    assert doc == {"a": 5}

    with pytest.raises(InvalidPathOperation):
        set_at_path(3, ("a",), 1)


def test_set_with_wrong_container_kind_raises() -> None:
    with pytest.raises(InvalidPathOperation):
        set_at_path({"a": {}}, ("a", 0), 1)


def test_delete_at_path_removes_keys_and_splices_items() -> None:
    doc = {"a": 1, "b": [1, 2, 3]}
    delete_at_path(doc, ("a",))
    delete_at_path(doc, ("b", 1))
    assert doc == {"b": [1, 3]}


def test_delete_missing_location_is_noop() -> None:
    doc = {"a": [1]}
    delete_at_path(doc, ("x", "y"))
    delete_at_path(doc, ("a", 4))
    delete_at_path(doc, ("a", "k"))
    assert doc == {"a": [1]}


def test_delete_through_primitive_or_root_raises() -> None:
    with pytest.raises(InvalidPathOperation):
        delete_at_path({"a": 1}, ("a", "b"))
    with pytest.raises(InvalidPathOperation):
        delete_at_path({"a": 1}, ())


def test_find_blocking_ancestor() -> None:
    doc = {"a": {"b": 1}, "l": [1]}
    assert find_blocking_ancestor(doc, ("a", "b", "c")) == ("a", "b")
    assert find_blocking_ancestor(doc, ("a", "x", "y")) is None
    assert find_blocking_ancestor(doc, ("l", "k")) == ("l",)
    assert find_blocking_ancestor(7, ("a",)) == ()


def test_walk_paths_visits_every_location() -> None:
    doc = {"a": 1, "c": {"d": [10, {"e": None}]}}
    assert list(walk_paths(doc)) == [
        (),
        ("a",),
        ("c",),
        ("c", "d"),
        ("c", "d", 0),
        ("c", "d", 1),
        ("c", "d", 1, "e"),
    ]
