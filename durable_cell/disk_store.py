from __future__ import annotations

import logging
from pathlib import Path

from .errors import NotFoundError, ReadError, WriteError
from .file_io import atomic_write_bytes, read_bytes, write_bytes_in_place
from .interfaces import ByteIO
from .locks import GLOBAL_PATH_LOCKS, PathLockRegistry

logger = logging.getLogger(__name__)


class FileByteIO(ByteIO):
    """
    Reads and writes whole files on the local disk.

    - Writes atomically (temp file + replace) unless `atomic=False`.
    - Serializes access per path through a lock registry.
    - Never creates missing parent directories; that is the path resolver's job.
    """

    def __init__(self, *, atomic: bool = True, locks: PathLockRegistry | None = None):
        self._atomic = atomic
        self._locks = locks if locks is not None else GLOBAL_PATH_LOCKS

    @property
    def atomic(self) -> bool:
        return self._atomic

    def read_bytes(self, path: Path) -> bytes:
        with self._locks.holding(path):
            try:
                return read_bytes(path)
            except FileNotFoundError as exc:
                raise NotFoundError(f"no stored value at {path}", path=path) from exc
            except OSError as exc:
                raise ReadError(f"failed to read {path}: {exc}", path=path) from exc

    def write_bytes(self, path: Path, data: bytes) -> None:
        with self._locks.holding(path):
            try:
                if self._atomic:
                    atomic_write_bytes(path, data)
                else:
                    write_bytes_in_place(path, data)
            except OSError as exc:
                raise WriteError(f"failed to write {path}: {exc}", path=path) from exc
        logger.debug("wrote %d bytes to %s", len(data), path)
