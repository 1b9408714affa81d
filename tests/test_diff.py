from __future__ import annotations

from jsonlww.recorder.diff import Delete, Update, diff


def test_equal_values_produce_no_changes() -> None:
    value = {"a": 1, "b": [1, {"c": None}]}
    assert diff(value, {"b": [1, {"c": None}], "a": 1}) == {}


def test_leaf_change_bumps_every_ancestor() -> None:
    old = {"a": 1, "c": {"d": "4", "e": 0}}
    new = {"a": 1, "c": {"d": "5", "e": 0}}

    changes = diff(old, new)

    assert list(changes) == [(), ("c",), ("c", "d")]
    assert changes[()] == Update(new)
    assert changes[("c",)] == Update({"d": "5", "e": 0})
    assert changes[("c", "d")] == Update("5")


def test_removed_key_is_a_single_delete() -> None:
    changes = diff({"a": 1, "b": {"x": {"y": 1}}}, {"a": 1})

    assert changes == {(): Update({"a": 1}), ("b",): Delete()}


def test_added_subtree_is_stamped_all_the_way_down() -> None:
    changes = diff({}, {"n": {"m": [1, {"k": 2}]}})

    assert set(changes) == {
        (),
        ("n",),
        ("n", "m"),
        ("n", "m", 0),
        ("n", "m", 1),
        ("n", "m", 1, "k"),
    }
    assert all(isinstance(change, Update) for change in changes.values())
    assert changes[("n", "m", 1, "k")] == Update(2)


def test_array_shrink_deletes_trailing_indices() -> None:
    changes = diff([1, 2, 3], [1])

    assert changes == {(): Update([1]), (1,): Delete(), (2,): Delete()}


def test_array_item_change() -> None:
    changes = diff([{"id": 1}, {"id": 2}], [{"id": 1}, {"id": 3}])

    assert list(changes) == [(), (1,), (1, "id")]


def test_primitive_replacement_does_not_recurse() -> None:
    changes = diff({"a": {"b": 1}}, {"a": 5})

    assert changes == {(): Update({"a": 5}), ("a",): Update(5)}


def test_primitive_roots() -> None:
    assert diff(3, 4) == {(): Update(4)}
    assert diff(3, {"a": 1}) == {(): Update({"a": 1})}


def test_container_kind_change_replaces_children() -> None:
    changes = diff({"a": {"k": 1}}, {"a": [5]})

    assert changes[("a",)] == Update([5])
    assert changes[("a", "k")] == Delete()
    assert changes[("a", 0)] == Update(5)


def test_bool_and_number_are_different_values() -> None:
    assert diff({"flag": 1}, {"flag": True}) == {(): Update({"flag": True}), ("flag",): Update(True)}
