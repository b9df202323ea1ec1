from __future__ import annotations

import dataclasses
import logging
import threading
import weakref
from pathlib import Path
from typing import Any, Callable, Generic, Protocol, TypeVar

from pydantic import BaseModel

from .errors import CellClosedError, FlushError, StorageError
from .interfaces import PathResolver
from .paths import StorageCategory, resolve_path
from .policy import Debounced, Immediate, Manual, UpdatePolicy, default_policy
from .store import SerializedStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING: Any = object()


class TimerHandle(Protocol):
    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def daemon_timer(interval: float, function: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    timer.name = "durable-cell-flush"
    return timer


_PLAIN_TYPES = (str, int, float, bool, list, dict)


def _infer_value_type(value: Any) -> Any:
    # Pin the stored JSON to the starting value's type so a wrong shape fails to decode.
    if isinstance(value, BaseModel) or (
        dataclasses.is_dataclass(value) and not isinstance(value, type)
    ):
        return type(value)
    if type(value) in _PLAIN_TYPES:
        return type(value)
    return Any


class _CellState(Generic[T]):
    """
    Everything the deferred flush and the finalizer need, kept apart from the
    public cell object so neither of them keeps the cell alive.

    All fields are guarded by `lock`.
    """

    def __init__(
        self,
        value: T,
        path: Path,
        policy: UpdatePolicy,
        store: SerializedStore[T],
        timer_factory: TimerFactory,
    ):
        self.lock = threading.RLock()
        self.value = value
        self.path = path
        self.policy = policy
        self.store = store
        self.timer_factory = timer_factory
        self.timer: TimerHandle | None = None
        self.generation = 0
        self.pending = False
        self.closed = False
        self.last_flush_error: StorageError | None = None

    def mutate(self, value: T) -> None:
        with self.lock:
            if self.closed:
                raise CellClosedError(f"cell for {self.path} is closed")
            self.value = value
            policy = self.policy
            if isinstance(policy, Manual):
                return
            self.pending = True
            if isinstance(policy, Immediate):
                self.flush("immediate")
            elif isinstance(policy, Debounced):
                self.arm(policy.seconds)

    def arm(self, seconds: float) -> None:
        self.disarm()
        generation = self.generation
        timer = self.timer_factory(seconds, lambda: self.on_timer(generation))
        self.timer = timer
        timer.start()
        logger.debug("flush of %s armed for %.3fs (generation %d)", self.path, seconds, generation)

    def disarm(self) -> None:
        # Bumping the generation invalidates a timer that is already firing.
        self.generation += 1
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def on_timer(self, generation: int) -> None:
        with self.lock:
            if generation != self.generation or self.closed:
                return
            self.timer = None
            try:
                self.flush("debounced")
            except FlushError:
                logger.critical(
                    "debounced flush of %s failed; value is still pending", self.path, exc_info=True
                )
                raise

    def flush(self, reason: str) -> None:
        try:
            self.store.save(self.value, self.path)
        except StorageError as exc:
            self.last_flush_error = exc
            raise FlushError(f"{reason} flush of {self.path} failed: {exc}", path=self.path) from exc
        self.pending = False
        self.last_flush_error = None
        logger.debug("%s flush of %s", reason, self.path)

    def save(self) -> None:
        with self.lock:
            self.store.save(self.value, self.path)
            self.disarm()
            self.pending = False
            self.last_flush_error = None

    def load(self) -> T:
        with self.lock:
            value = self.store.load(self.path)
            self.value = value
            return value

    def dispose(self) -> None:
        with self.lock:
            if self.closed:
                return
            self.closed = True
            self.disarm()
            if self.pending:
                self.flush("final")


class DebouncedCell(Generic[T]):
    """
    An in-memory value mirrored to one file, flushed according to an
    UpdatePolicy.

    Reads never touch the disk. Writes go through the policy: Immediate saves
    before returning, Debounced (re)arms a single background timer that saves
    the latest value once writes go quiet, Manual leaves storage alone until
    save() is called. Closing the cell (explicitly, by leaving a `with` block,
    by garbage collection, or at interpreter exit) performs one last flush if
    an automatic write is still owed.

    Mutating the value in place (e.g. appending to a list) bypasses the
    policy; use update() or assign a new value.
    """

    def __init__(
        self,
        initial_value: T,
        path: Path | str,
        *,
        policy: UpdatePolicy | None = None,
        store: SerializedStore[T] | None = None,
        value_type: Any = _MISSING,
        timer_factory: TimerFactory | None = None,
    ):
        if store is None:
            if value_type is _MISSING:
                value_type = _infer_value_type(initial_value)
            store = SerializedStore.json(value_type)
        self._state: _CellState[T] = _CellState(
            initial_value,
            Path(path),
            policy if policy is not None else default_policy(),
            store,
            timer_factory or daemon_timer,
        )
        self._finalizer = weakref.finalize(self, self._state.dispose)

    @classmethod
    def with_default(
        cls,
        default_value: T,
        path: Path | str,
        *,
        policy: UpdatePolicy | None = None,
        store: SerializedStore[T] | None = None,
        value_type: Any = _MISSING,
        timer_factory: TimerFactory | None = None,
    ) -> "DebouncedCell[T]":
        """
        Start from the stored value if `path` holds one that decodes, otherwise
        from `default_value`. A missing or corrupt file is not an error.
        """
        path = Path(path)
        if store is None:
            if value_type is _MISSING:
                value_type = _infer_value_type(default_value)
            store = SerializedStore.json(value_type)
        try:
            value = store.load(path)
        except StorageError as exc:
            logger.debug("using default for %s: %s", path, exc)
            value = default_value
        return cls(value, path, policy=policy, store=store, timer_factory=timer_factory)

    @classmethod
    def named(
        cls,
        filename: str,
        *,
        category: StorageCategory = StorageCategory.DOCUMENTS,
        initial_value: Any = _MISSING,
        default_value: Any = _MISSING,
        resolver: PathResolver = resolve_path,
        **kwargs: Any,
    ) -> "DebouncedCell[Any]":
        """
        Place the backing file by name inside a storage category directory.

        Exactly one of `initial_value` / `default_value` selects the
        construction form. Raises PathResolutionError if no path can be
        resolved; no cell is created in that case.
        """
        if (initial_value is _MISSING) == (default_value is _MISSING):
            raise TypeError("pass exactly one of initial_value or default_value")
        path = resolver(filename, category)
        if default_value is not _MISSING:
            return cls.with_default(default_value, path, **kwargs)
        return cls(initial_value, path, **kwargs)

    @property
    def value(self) -> T:
        return self._state.value

    @value.setter
    def value(self, new_value: T) -> None:
        self._state.mutate(new_value)

    def get(self) -> T:
        return self._state.value

    def set(self, new_value: T) -> None:
        self._state.mutate(new_value)

    def update(self, fn: Callable[[T], T]) -> T:
        """Atomically replace the value with fn(value); returns the new value."""
        with self._state.lock:
            new_value = fn(self._state.value)
            self._state.mutate(new_value)
            return new_value

    def save(self) -> None:
        """Write the current value now, whatever the policy. Raises StorageError."""
        self._state.save()

    def load(self) -> T:
        """
        Replace the value with the stored one without triggering the policy.
        Raises StorageError and keeps the current value on failure.
        """
        return self._state.load()

    def close(self) -> None:
        """Cancel any armed flush and write the value if a write is still owed."""
        self._finalizer()

    @property
    def path(self) -> Path:
        return self._state.path

    @property
    def policy(self) -> UpdatePolicy:
        return self._state.policy

    @property
    def pending(self) -> bool:
        return self._state.pending

    @property
    def armed(self) -> bool:
        return self._state.timer is not None

    @property
    def closed(self) -> bool:
        return self._state.closed

    @property
    def last_flush_error(self) -> StorageError | None:
        return self._state.last_flush_error

    def __enter__(self) -> "DebouncedCell[T]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DebouncedCell(path={str(self.path)!r}, policy={self.policy!r}, pending={self.pending})"
