#!/usr/bin/env python3
"""Inspect recorder changes from the command line.

Usage
-----
    python scripts/recorder_diff.py diff old.json new.json
    python scripts/recorder_diff.py merge local.blob remote.blob > merged.blob
    python scripts/recorder_diff.py timestamps local.blob
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from jsonlww import Delete, MalformedInput, Recorder, diff, format_path  # noqa: E402

MAX_VAL_WIDTH = 60


def _truncate(val: Any, width: int = MAX_VAL_WIDTH) -> str:
    s = json.dumps(val, ensure_ascii=False)
    if len(s) <= width:
        return s
    return s[: width - 3] + "..."


def _print_table(rows: list[tuple[str, str, str]], header: tuple[str, str, str]) -> None:
    widths = [max(len(header[i]), *(len(r[i]) for r in rows)) for i in range(3)]
    print("  ".join(f"{h:<{w}}" for h, w in zip(header, widths, strict=True)))
    print("  ".join("-" * w for w in widths))
    for row in rows:
        print("  ".join(f"{c:<{w}}" for c, w in zip(row, widths, strict=True)))


def _cmd_diff(args: argparse.Namespace) -> int:
    old = json.loads(Path(args.old).read_text(encoding="utf-8"))
    new = json.loads(Path(args.new).read_text(encoding="utf-8"))

    changes = diff(old, new)
    if not changes:
        print("No differences found.")
        return 0

    rows: list[tuple[str, str, str]] = []
    for path, change in changes.items():
        if isinstance(change, Delete):
            rows.append((format_path(path) or "<root>", "delete", ""))
        else:
            rows.append((format_path(path) or "<root>", "update", _truncate(change.value)))
    _print_table(rows, ("Path", "Change", "Value"))
    print(f"\n{len(changes)} change(s).")
    return 0


def _load_blob(path: str) -> Recorder:
    return Recorder.deserialize(Path(path).read_text(encoding="utf-8"))


def _cmd_merge(args: argparse.Namespace) -> int:
    local = _load_blob(args.local)
    local.merge(_load_blob(args.remote))
    print(local.serialize())
    return 0


def _cmd_timestamps(args: argparse.Namespace) -> int:
    recorder = _load_blob(args.blob)
    rows: list[tuple[str, str, str]] = []
    for path in sorted(recorder.paths()):
        entry = recorder.get_timestamp_entry(path)
        assert entry is not None
        rows.append((path or "<root>", str(entry.timestamp), "deleted" if entry.deleted else ""))
    _print_table(rows, ("Path", "Timestamp", "State"))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Diff JSON documents and merge recorder blobs.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_diff = sub.add_parser("diff", help="Show the per-path change set between two JSON files")
    p_diff.add_argument("old", help="Older JSON document")
    p_diff.add_argument("new", help="Newer JSON document")
    p_diff.set_defaults(func=_cmd_diff)

    p_merge = sub.add_parser("merge", help="Merge two serialized recorders, print the result")
    p_merge.add_argument("local", help="Blob that receives the merge")
    p_merge.add_argument("remote", help="Blob merged into local")
    p_merge.set_defaults(func=_cmd_merge)

    p_ts = sub.add_parser("timestamps", help="List the timestamp index of a serialized recorder")
    p_ts.add_argument("blob", help="Serialized recorder")
    p_ts.set_defaults(func=_cmd_timestamps)

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        code = args.func(args)
    except MalformedInput as exc:
        print(f"error: {exc}", file=sys.stderr)
        code = 2
    sys.exit(code)


if __name__ == "__main__":
    main()
