"""Recorder layer.

This package owns the JSON value model, path addressing, the structural diff
and the per-path timestamp index.  :class:`Recorder` is the only component
that mutates a tracked document or reconciles two of them.
"""

from jsonlww.recorder.diff import Change, ChangeSet, Delete, Update, diff
from jsonlww.recorder.models import RecorderSnapshot, TimestampEntry
from jsonlww.recorder.path import (
    MISSING,
    ROOT,
    JsonPath,
    Segment,
    as_path,
    delete_at_path,
    format_path,
    get_at_path,
    parse_path,
    set_at_path,
    walk_paths,
)
from jsonlww.recorder.recorder import Recorder
from jsonlww.recorder.value import JsonValue, clone, ensure_json_value, is_container, is_primitive, json_equal

__all__ = [
    "MISSING",
    "ROOT",
    "Change",
    "ChangeSet",
    "Delete",
    "JsonPath",
    "JsonValue",
    "Recorder",
    "RecorderSnapshot",
    "Segment",
    "TimestampEntry",
    "Update",
    "as_path",
    "clone",
    "delete_at_path",
    "diff",
    "ensure_json_value",
    "format_path",
    "get_at_path",
    "is_container",
    "is_primitive",
    "json_equal",
    "parse_path",
    "set_at_path",
    "walk_paths",
]
