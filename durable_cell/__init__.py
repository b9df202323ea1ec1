from __future__ import annotations

from .async_cell import AsyncDebouncedCell
from .cell import DebouncedCell, daemon_timer
from .codecs import JsonCodec
from .disk_store import FileByteIO
from .errors import (
    CellClosedError,
    DecodeError,
    DurableCellError,
    EncodeError,
    FlushError,
    IoError,
    NotFoundError,
    PathResolutionError,
    ReadError,
    StorageError,
    WriteError,
)
from .paths import StorageCategory, resolve_path
from .policy import Debounced, Immediate, Manual, UpdatePolicy, default_policy, parse_policy
from .store import SerializedStore

__version__ = "0.1.0"

__all__ = [
    "AsyncDebouncedCell",
    "DebouncedCell",
    "daemon_timer",
    "JsonCodec",
    "FileByteIO",
    "SerializedStore",
    "StorageCategory",
    "resolve_path",
    "UpdatePolicy",
    "Immediate",
    "Debounced",
    "Manual",
    "default_policy",
    "parse_policy",
    "DurableCellError",
    "PathResolutionError",
    "StorageError",
    "EncodeError",
    "DecodeError",
    "IoError",
    "NotFoundError",
    "ReadError",
    "WriteError",
    "FlushError",
    "CellClosedError",
]
