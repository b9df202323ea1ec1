from __future__ import annotations

import heapq
import itertools
from pathlib import Path
import sys
from typing import Callable

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from durable_cell.errors import NotFoundError, WriteError  # noqa: E402


@pytest.fixture
def sandbox_root(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect every storage category into a temp directory so tests never touch
    real user directories, and pin the default settings.
    """
    root = tmp_path / "storage"
    monkeypatch.setenv("DURABLE_CELL_ROOT", str(root))
    monkeypatch.delenv("DURABLE_CELL_UPDATE_POLICY", raising=False)
    monkeypatch.delenv("DURABLE_CELL_ATOMIC_WRITES", raising=False)
    monkeypatch.delenv("DURABLE_CELL_JSON_INDENT", raising=False)
    return root


class VirtualTimer:
    def __init__(self, clock: "VirtualClock", interval: float, function: Callable[[], None]):
        self.clock = clock
        self.interval = interval
        self.function = function
        self.deadline: float | None = None
        self.cancelled = False

    def start(self) -> None:
        self.deadline = self.clock.now + self.interval
        self.clock._schedule(self)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        # What a timer thread does once its wait is over, even if cancelled meanwhile.
        self.function()


class VirtualClock:
    """
    Deterministic stand-in for threading.Timer: timers only fire when the test
    advances time, in deadline order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[VirtualTimer] = []
        self._queue: list[tuple[float, int, VirtualTimer]] = []
        self._seq = itertools.count()

    def __call__(self, interval: float, function: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self, interval, function)
        self.timers.append(timer)
        return timer

    def _schedule(self, timer: VirtualTimer) -> None:
        assert timer.deadline is not None
        heapq.heappush(self._queue, (timer.deadline, next(self._seq), timer))

    @property
    def live(self) -> list[VirtualTimer]:
        return [t for t in self.timers if not t.cancelled and t.deadline is not None and t.deadline > self.now]

    def advance_to(self, t: float) -> None:
        while self._queue and self._queue[0][0] <= t:
            deadline, _, timer = heapq.heappop(self._queue)
            self.now = deadline
            if not timer.cancelled:
                timer.fire()
        self.now = t


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


class MemoryByteIO:
    """ByteIO that keeps files in a dict and records every write."""

    def __init__(self) -> None:
        self.files: dict[Path, bytes] = {}
        self.writes: list[tuple[Path, bytes]] = []
        self.fail_writes = False

    def write_bytes(self, path: Path, data: bytes) -> None:
        if self.fail_writes:
            raise WriteError(f"refusing to write {path}", path=path)
        self.files[path] = data
        self.writes.append((path, data))

    def read_bytes(self, path: Path) -> bytes:
        try:
            return self.files[path]
        except KeyError as exc:
            raise NotFoundError(f"no stored value at {path}", path=path) from exc


@pytest.fixture
def memory_io() -> MemoryByteIO:
    return MemoryByteIO()
