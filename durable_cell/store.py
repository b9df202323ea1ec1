from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Generic, TypeVar

from .codecs import JsonCodec
from .disk_store import FileByteIO
from .errors import StorageError
from .interfaces import ByteIO, Codec
from .settings import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SerializedStore(Generic[T]):
    """
    Loads and saves one typed value at a time through a codec and a byte I/O.

    Holds no state about any particular file; the path is passed per call.
    Every failure is a StorageError subclass carrying the path.
    """

    def __init__(self, codec: Codec[T], io: ByteIO):
        self._codec = codec
        self._io = io

    @classmethod
    def json(cls, value_type: Any = Any) -> "SerializedStore[T]":
        """JSON on local disk, configured from settings."""
        settings = get_settings()
        return cls(
            JsonCodec(value_type, indent=settings.json_indent or None),
            FileByteIO(atomic=settings.atomic_writes),
        )

    @property
    def codec(self) -> Codec[T]:
        return self._codec

    def save(self, value: T, path: Path) -> None:
        try:
            data = self._codec.encode(value)
            self._io.write_bytes(path, data)
        except StorageError as exc:
            if exc.path is None:
                exc.path = path
            raise

    def load(self, path: Path) -> T:
        try:
            data = self._io.read_bytes(path)
            value = self._codec.decode(data)
        except StorageError as exc:
            if exc.path is None:
                exc.path = path
            raise
        logger.debug("loaded %s (%d bytes)", path, len(data))
        return value
