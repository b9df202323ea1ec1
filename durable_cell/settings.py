from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    # Storage location override; None means per-platform user directories
    root_dir: Path | None

    # Default update policy for cells that don't pass one, e.g. "debounced:2.0"
    update_policy: str

    # Default byte I/O / codec
    atomic_writes: bool
    json_indent: int


def get_settings() -> Settings:
    load_dotenv("local.env")

    raw_root = os.getenv("DURABLE_CELL_ROOT", "").strip()
    root_dir = Path(raw_root).expanduser() if raw_root else None

    update_policy = os.getenv("DURABLE_CELL_UPDATE_POLICY", "debounced:2.0").strip()

    atomic_writes = _env_bool("DURABLE_CELL_ATOMIC_WRITES", True)
    json_indent = _env_int("DURABLE_CELL_JSON_INDENT", 2)

    return Settings(
        root_dir=root_dir,
        update_policy=update_policy,
        atomic_writes=atomic_writes,
        json_indent=json_indent,
    )
