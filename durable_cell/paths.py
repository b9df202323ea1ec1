from __future__ import annotations

import enum
import os
import sys
import tempfile
from pathlib import Path

from .errors import PathResolutionError
from .settings import get_settings


class StorageCategory(str, enum.Enum):
    DOCUMENTS = "documents"
    CACHES = "caches"
    DESKTOP = "desktop"
    APPLICATION_SUPPORT = "application_support"
    TEMPORARY = "temporary"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _env_dir(name: str, fallback: Path) -> Path:
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else fallback


def platform_dir(category: StorageCategory) -> Path:
    """Conventional per-user directory for `category` on this platform."""
    home = Path.home()
    if category is StorageCategory.DOCUMENTS:
        return home / "Documents"
    if category is StorageCategory.DESKTOP:
        return home / "Desktop"
    if category is StorageCategory.TEMPORARY:
        return Path(tempfile.gettempdir())
    if category is StorageCategory.CACHES:
        if sys.platform == "darwin":
            return home / "Library" / "Caches"
        if sys.platform == "win32":
            return _env_dir("LOCALAPPDATA", home / "AppData" / "Local")
        return _env_dir("XDG_CACHE_HOME", home / ".cache")
    if category is StorageCategory.APPLICATION_SUPPORT:
        if sys.platform == "darwin":
            return home / "Library" / "Application Support"
        if sys.platform == "win32":
            return _env_dir("APPDATA", home / "AppData" / "Roaming")
        return _env_dir("XDG_DATA_HOME", home / ".local" / "share")
    raise PathResolutionError(f"unknown storage category: {category!r}")


def category_dir(category: StorageCategory) -> Path:
    root = get_settings().root_dir
    if root is not None:
        return root / category.value
    return platform_dir(category)


def resolve_path(name: str, category: StorageCategory = StorageCategory.DOCUMENTS) -> Path:
    """
    Map a plain file name and a storage category to a concrete file path,
    creating the category directory if needed.

    Raises PathResolutionError for names that are empty or not a single path
    component, and when the directory cannot be created.
    """
    if not name or name in (".", "..") or Path(name).name != name or "/" in name or "\\" in name:
        raise PathResolutionError(f"invalid storage file name: {name!r}")
    try:
        category = StorageCategory(category)
    except ValueError as exc:
        raise PathResolutionError(f"unknown storage category: {category!r}") from exc
    base = category_dir(category)
    try:
        ensure_dir(base)
    except OSError as exc:
        raise PathResolutionError(f"cannot create {category.value} directory {base}: {exc}") from exc
    return base / name
