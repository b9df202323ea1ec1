from __future__ import annotations

from pathlib import Path


class DurableCellError(Exception):
    """Base class for every error raised by durable_cell."""


class PathResolutionError(DurableCellError):
    """A logical file name could not be turned into a usable storage path."""


class StorageError(DurableCellError):
    """
    A save or load against the backing file failed.

    `path` is the file that was being read or written, when known.
    """

    def __init__(self, message: str, *, path: Path | None = None):
        super().__init__(message)
        self.path = path


class EncodeError(StorageError):
    pass


class DecodeError(StorageError):
    pass


class IoError(StorageError):
    pass


class NotFoundError(IoError):
    pass


class ReadError(IoError):
    pass


class WriteError(IoError):
    pass


class FlushError(DurableCellError):
    """An automatic, policy-triggered flush failed. Chained to the StorageError."""

    def __init__(self, message: str, *, path: Path):
        super().__init__(message)
        self.path = path


class CellClosedError(DurableCellError):
    pass
