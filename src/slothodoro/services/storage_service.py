"""Key/value persistence for the engine's state aggregate.

The engine only needs ``get`` / ``set`` / ``delete`` on string values. The
default store keeps one JSON file per key in the platform user data directory.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir

from slothodoro.exceptions import StorageCorrupt
from slothodoro.models.state import PersistentState
from slothodoro.utils.logger import get_logger

STORAGE_KEY = "slothodoro:v1"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class KeyValueStore(Protocol):
    """Minimal storage contract used by StateRepository."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Stores each key as ``<data_dir>/<sanitised key>.json``."""

    def __init__(self, data_dir: Path | None = None):
        if data_dir is None:
            data_dir = Path(user_data_dir("slothodoro"))

        self.data_dir = data_dir
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{_UNSAFE_CHARS.sub('-', key)}.json"

    def get(self, key: str) -> str | None:
        """Stored text for ``key``, or None if nothing is stored.

        Raises:
            StorageCorrupt: If the file exists but cannot be read as UTF-8 text.
        """
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as e:
            raise StorageCorrupt(f"Cannot read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.chmod(0o600)
        tmp.replace(path)

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()


class StateRepository:
    """Loads and saves the PersistentState under a single storage key."""

    def __init__(self, store: KeyValueStore | None = None, key: str = STORAGE_KEY):
        self.store = store if store is not None else JsonFileStore()
        self.key = key
        self.logger = get_logger()

    def load(self) -> PersistentState:
        """Load state, falling back to defaults for missing or corrupt data."""
        try:
            blob = self.store.get(self.key)
            if not blob:
                return PersistentState()
            return PersistentState.from_json(blob)
        except StorageCorrupt as e:
            self.logger.warning("stored state unreadable, using defaults: %s", e)
            return PersistentState()

    def save(self, state: PersistentState) -> None:
        self.store.set(self.key, state.to_json())

    def clear(self) -> None:
        self.store.delete(self.key)
