"""
Key/value storage controllers for the Parse SDK.

Storage is a best-effort cache, not a source of truth: reads that fail
return None and writes that fail (capacity, I/O) are dropped silently.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY_BYTES = 10 * 1024 * 1024


def _entry_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class MemoryStorageController:
    """In-process storage with a fixed capacity."""

    is_async = False

    def __init__(self, capacity_bytes: int = DEFAULT_CAPACITY_BYTES):
        self._capacity = capacity_bytes
        self._items: dict[str, str] = {}

    @property
    def used_bytes(self) -> int:
        return sum(_entry_size(k, v) for k, v in self._items.items())

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        current = self._items.get(key)
        used = self.used_bytes - (_entry_size(key, current) if current is not None else 0)
        if used + _entry_size(key, value) > self._capacity:
            logger.debug(f"[storage] Dropped {key}: capacity exceeded")
            return
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()


class FileStorageController:
    """
    Storage persisted as a JSON object in a single file.

    Every read re-loads the file, so several controllers pointed at the
    same path observe each other's writes.
    """

    is_async = False

    def __init__(self, path: str | Path, capacity_bytes: int = DEFAULT_CAPACITY_BYTES):
        self._path = Path(path)
        self._capacity = capacity_bytes

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.debug(f"[storage] Could not read {self._path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, items: dict[str, str]) -> None:
        encoded = json.dumps(items)
        if len(encoded.encode("utf-8")) > self._capacity:
            logger.debug(f"[storage] Dropped write to {self._path}: capacity exceeded")
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(encoded, encoding="utf-8")
        except OSError as e:
            logger.debug(f"[storage] Could not write {self._path}: {e}")

    def get_item(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._dump(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._dump(items)

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"[storage] Could not clear {self._path}: {e}")
