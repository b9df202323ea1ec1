from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from durable_cell.async_cell import AsyncDebouncedCell
from durable_cell.cell import DebouncedCell
from durable_cell.errors import NotFoundError
from durable_cell.policy import Debounced, Immediate, Manual


def test_async_cell_manual_roundtrip(sandbox_root: Path, tmp_path: Path):
    async def _run():
        path = tmp_path / "entries.json"
        cell = AsyncDebouncedCell(DebouncedCell([], path, policy=Manual()))

        with pytest.raises(NotFoundError):
            await cell.load()

        await cell.set(["banana"])
        assert not path.exists()
        await cell.save()

        await cell.update(lambda entries: entries + ["toast"])
        assert cell.value == ["banana", "toast"]

        assert await cell.load() == ["banana"]
        assert cell.pending is False

    asyncio.run(_run())


def test_async_cell_immediate_writes_before_returning(sandbox_root: Path, tmp_path: Path):
    async def _run():
        path = tmp_path / "goal.json"
        cell = AsyncDebouncedCell(DebouncedCell(None, path, policy=Immediate()))

        await cell.set(2000)

        assert path.read_text(encoding="utf-8").strip() == "2000"
        assert cell.policy == Immediate()

    asyncio.run(_run())


def test_async_context_exit_flushes(sandbox_root: Path, tmp_path: Path):
    async def _run():
        path = tmp_path / "late.json"
        async with AsyncDebouncedCell(DebouncedCell("x", path, policy=Debounced(seconds=60))) as cell:
            await cell.set("y")
            assert cell.pending is True
        assert cell.cell.closed is True
        assert path.read_text(encoding="utf-8").strip() == '"y"'

    asyncio.run(_run())
