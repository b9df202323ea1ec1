from __future__ import annotations

from pathlib import Path
from typing import Protocol, TypeVar

from .paths import StorageCategory

T = TypeVar("T")


class Codec(Protocol[T]):
    """
    Pure encode/decode pair for a cell's value type.
    """

    def encode(self, value: T) -> bytes:
        """Serialize `value`; raise EncodeError if it is not representable."""
        ...

    def decode(self, data: bytes) -> T:
        """Parse `data`; raise DecodeError on corruption or schema mismatch."""
        ...


class ByteIO(Protocol):
    """
    The only filesystem touchpoints used by SerializedStore.
    """

    def write_bytes(self, path: Path, data: bytes) -> None:
        """Replace the full contents of `path`; raise WriteError on failure."""
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Return the full contents of `path`; raise NotFoundError or ReadError."""
        ...


class PathResolver(Protocol):
    def __call__(self, name: str, category: StorageCategory) -> Path:
        ...
