from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Generic, TypeVar

from .cell import DebouncedCell
from .policy import UpdatePolicy

T = TypeVar("T")


class AsyncDebouncedCell(Generic[T]):
    """
    Async wrapper around a DebouncedCell.
    Uses asyncio.to_thread so saves, loads and immediate-mode flushes don't
    block the event loop on file I/O. Reads stay synchronous.
    """

    def __init__(self, cell: DebouncedCell[T]) -> None:
        self._cell = cell

    @property
    def cell(self) -> DebouncedCell[T]:
        return self._cell

    @property
    def value(self) -> T:
        return self._cell.value

    @property
    def path(self) -> Path:
        return self._cell.path

    @property
    def policy(self) -> UpdatePolicy:
        return self._cell.policy

    @property
    def pending(self) -> bool:
        return self._cell.pending

    async def set(self, value: T) -> None:
        await asyncio.to_thread(self._cell.set, value)

    async def update(self, fn: Callable[[T], T]) -> T:
        return await asyncio.to_thread(self._cell.update, fn)

    async def save(self) -> None:
        await asyncio.to_thread(self._cell.save)

    async def load(self) -> T:
        return await asyncio.to_thread(self._cell.load)

    async def aclose(self) -> None:
        await asyncio.to_thread(self._cell.close)

    async def __aenter__(self) -> "AsyncDebouncedCell[T]":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
