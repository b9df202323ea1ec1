from __future__ import annotations

import os
from pathlib import Path


def read_bytes(path: Path) -> bytes:
    """
    Read the raw contents of a backing file.

    Raises FileNotFoundError for missing files; other OSErrors propagate.
    Empty files are returned as b"" and left to the codec to reject.
    """
    with path.open("rb") as f:
        return f.read()


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """
    Atomically write bytes to disk by writing to a temp file then replacing.

    The parent directory must already exist. The temp file is removed if
    the write fails before the replace.
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def write_bytes_in_place(path: Path, payload: bytes) -> None:
    with path.open("wb") as f:
        f.write(payload)
