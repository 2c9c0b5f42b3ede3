from __future__ import annotations

from pyqt_configform.core.field_manifest import FieldKind
from pyqt_configform.core.value_tree import (
    ROOT_PATH,
    array_append,
    array_default_item,
    array_remove,
    array_replace,
    child_path,
    empty_value_for,
    format_path,
    get_in,
    is_below,
    is_within,
    item_path,
    map_add_row,
    map_remove_key,
    map_rename_key,
    set_in,
)


def test_paths_compose_and_render() -> None:
    path = child_path(item_path(child_path(ROOT_PATH, "servers"), 2), "host")
    assert path == ("servers", 2, "host")
    assert format_path(path) == "servers[2].host"
    assert format_path(ROOT_PATH) == ""


def test_child_path_keeps_names_verbatim() -> None:
    assert child_path(ROOT_PATH, "metadata.labels") == ("metadata.labels",)
    assert child_path(ROOT_PATH, "") == ("",)
    assert child_path(("a",), None) == ("a", "")


def test_is_below_matches_strict_descendants_only() -> None:
    assert is_below(("conn", "host"), ("conn",))
    assert is_below(("tags", 0), ("tags",))
    assert is_below(("a",), ROOT_PATH)
    assert not is_below(("conn",), ("conn",))
    assert not is_below(("connection",), ("conn",))


def test_is_within_matches_rendered_descendants() -> None:
    assert is_within("conn.host", "conn")
    assert is_within("tags[0]", "tags")
    assert is_within("conn", "conn")
    assert not is_within("connection", "conn")


def test_get_in_returns_default_for_missing_or_mistyped_steps() -> None:
    root = {"a": {"b": [10, {"c": "x"}]}}
    assert get_in(root, ("a", "b", 1, "c")) == "x"
    assert get_in(root, ("a", "b", 5), "none") == "none"
    assert get_in(root, ("a", "b", "c")) is None
    assert get_in(root, ROOT_PATH) is root


def test_get_in_reads_dotted_and_empty_keys_literally() -> None:
    root = {"metadata.labels": "flat", "metadata": {"labels": "nested"}, "": "blank"}
    assert get_in(root, ("metadata.labels",)) == "flat"
    assert get_in(root, ("",)) == "blank"


def test_set_in_copies_the_touched_path_only() -> None:
    sibling = {"keep": True}
    root = {"a": {"x": 1}, "sibling": sibling}
    updated = set_in(root, ("a", "x"), 2)

    assert updated == {"a": {"x": 2}, "sibling": {"keep": True}}
    assert root == {"a": {"x": 1}, "sibling": {"keep": True}}
    assert updated["sibling"] is sibling


def test_set_in_creates_missing_containers() -> None:
    assert set_in({}, ("a", "b"), 1) == {"a": {"b": 1}}
    assert set_in({}, ("items", 1, "name"), "n") == {"items": [None, {"name": "n"}]}
    assert set_in({"a": 1}, ROOT_PATH, {"b": 2}) == {"b": 2}


def test_set_in_writes_dotted_and_empty_keys_without_nesting() -> None:
    assert set_in({}, ("metadata.labels",), "v") == {"metadata.labels": "v"}
    assert set_in({"keep": "k"}, ("",), "x") == {"keep": "k", "": "x"}


def test_empty_values_per_kind() -> None:
    assert empty_value_for(FieldKind.STRING) == ""
    assert empty_value_for(FieldKind.BOOLEAN) is False
    assert empty_value_for(FieldKind.ARRAY) == []
    assert empty_value_for(FieldKind.MAP) == {}
    assert empty_value_for(FieldKind.NUMBER) is None


def test_map_rename_onto_existing_key_overwrites_it() -> None:
    assert map_rename_key({"a": "1", "b": "2"}, "a", "b") == {"b": "1"}


def test_map_rename_and_remove_keep_other_keys() -> None:
    mapping = {"a": "1", "b": "2"}
    assert map_rename_key(mapping, "a", "c") == {"b": "2", "c": "1"}
    assert map_remove_key(mapping, "a") == {"b": "2"}
    assert map_add_row(mapping) == {"a": "1", "b": "2", "": ""}
    assert mapping == {"a": "1", "b": "2"}


def test_array_remove_compacts_items() -> None:
    assert array_remove(["x", "y", "z"], 1) == ["x", "z"]
    assert array_remove(["x"], 3) == ["x"]


def test_array_add_uses_item_type_defaults() -> None:
    assert array_append([1], array_default_item("number")) == [1, 0]
    assert array_append([], array_default_item("object")) == [{}]
    assert array_append(None, array_default_item("string")) == [""]


def test_array_replace_ignores_out_of_range_index() -> None:
    items = ["a", "b"]
    assert array_replace(items, 1, "c") == ["a", "c"]
    assert array_replace(items, 4, "c") == ["a", "b"]
    assert items == ["a", "b"]
