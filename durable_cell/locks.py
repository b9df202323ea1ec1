from __future__ import annotations

import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path


class PathLockRegistry:
    """
    Hands out one lock per backing file so that writers inside this process
    never interleave on the same path, while different files never contend.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @staticmethod
    def _key(path: Path) -> str:
        return os.path.normcase(str(Path(path).resolve()))

    def lock_for(self, path: Path) -> threading.Lock:
        key = self._key(path)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def holding(self, path: Path) -> Iterator[None]:
        with self.lock_for(path):
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


GLOBAL_PATH_LOCKS = PathLockRegistry()
