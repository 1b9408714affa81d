"""Timestamp index entries and the serialized recorder snapshot."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jsonlww.exceptions import InvalidJsonValue, InvalidPath
from jsonlww.recorder.path import parse_path
from jsonlww.recorder.value import ensure_json_value


class TimestampEntry(BaseModel):
    """Last modification of one path.

    Parameters
    ----------
    timestamp : int
        Epoch milliseconds of the last update or deletion that touched the
        path.  Stored as an integer so it round-trips through JSON exactly.
    deleted : bool
        Whether that last operation removed the path.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    timestamp: int = Field(..., ge=0)
    deleted: bool = False


class RecorderSnapshot(BaseModel):
    """Wire shape of a serialized recorder.

    Exactly two top-level fields: the JSON document and the timestamp index
    keyed by canonical path strings.
    """

    model_config = ConfigDict(extra="forbid")

    value: Any = Field(...)
    timestamps: dict[str, TimestampEntry]

    @field_validator("value")
    @classmethod
    def _check_json_value(cls, value: Any) -> Any:
        try:
            ensure_json_value(value)
        except InvalidJsonValue as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("timestamps")
    @classmethod
    def _check_paths(cls, value: dict[str, TimestampEntry]) -> dict[str, TimestampEntry]:
        for text in value:
            try:
                parse_path(text)
            except InvalidPath as exc:
                raise ValueError(str(exc)) from exc
        return value
