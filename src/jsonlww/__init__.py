"""jsonlww - path-granular last-write-wins merging of JSON documents."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jsonlww")
except PackageNotFoundError:
    __version__ = "0+local"

from jsonlww.codec import decode_payload, encode_payload
from jsonlww.config import EncryptConfig, SyncConfig
from jsonlww.exceptions import (
    InvalidJsonValue,
    InvalidPath,
    InvalidPathOperation,
    JsonLwwError,
    MalformedInput,
    SyncConfigError,
    SyncCryptoError,
    SyncStoreError,
    SyncVerificationError,
)
from jsonlww.recorder import (
    ChangeSet,
    Delete,
    JsonPath,
    JsonValue,
    Recorder,
    TimestampEntry,
    Update,
    diff,
    format_path,
    parse_path,
)
from jsonlww.sync import BlobStore, MemoryBlobStore, SyncSession

__all__ = [
    "__version__",
    "BlobStore",
    "ChangeSet",
    "Delete",
    "EncryptConfig",
    "InvalidJsonValue",
    "InvalidPath",
    "InvalidPathOperation",
    "JsonLwwError",
    "JsonPath",
    "JsonValue",
    "MalformedInput",
    "MemoryBlobStore",
    "Recorder",
    "SyncConfig",
    "SyncConfigError",
    "SyncCryptoError",
    "SyncSession",
    "SyncStoreError",
    "SyncVerificationError",
    "TimestampEntry",
    "Update",
    "decode_payload",
    "diff",
    "encode_payload",
    "format_path",
    "parse_path",
]
