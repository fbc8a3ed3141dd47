"""Durable storage backends.

Each backend is a flat key/value store of serialized strings. The persistence
adapter tries backends in order at load time and writes to the first one.
"""

from __future__ import annotations

import asyncio
import json
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pharma_pitch.config.logging import get_logger
from pharma_pitch.exceptions import StorageError

logger = get_logger(__name__)


def _replace_file(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` via a synced temp file and ``os.replace``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


class StorageBackend(ABC):
    """Async key/value store of serialized collections."""

    name: str = "backend"

    @abstractmethod
    async def read(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""

    @abstractmethod
    async def write(self, key: str, value: str) -> None:
        """Durably store ``value`` under ``key``."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Missing keys are not an error."""


class JsonDirectoryBackend(StorageBackend):
    """Primary store: one ``<key>.json`` file per key, file I/O off the event loop."""

    name = "primary"

    def __init__(self, root: Path):
        self.root = root

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or ".." in key:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    async def read(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return await asyncio.to_thread(self._read_sync, path)
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read '{key}'", details=str(e)) from e

    @staticmethod
    def _read_sync(path: Path) -> str | None:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    async def write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(_replace_file, path, value)
        except OSError as e:
            raise StorageError(f"Failed to write '{key}'", details=str(e)) from e
        logger.debug("Wrote %s (%d chars)", path.name, len(value))

    async def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete '{key}'", details=str(e)) from e


class LocalStoreBackend(StorageBackend):
    """Fallback store: a synchronous single-file map of key to raw string.

    Mirrors a same-device key/value store where every value is an opaque
    string the caller has to parse. The async methods wrap the sync ones.
    """

    name = "fallback"

    def __init__(self, path: Path):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StorageError(f"Corrupt local store {self.path.name}", details=str(e)) from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupt local store {self.path.name}", details="not an object")
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        with self._lock:
            try:
                return self._load().get(key)
            except OSError as e:
                raise StorageError(f"Failed to read '{key}'", details=str(e)) from e

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._load()
                data[key] = value
                _replace_file(self.path, json.dumps(data))
            except OSError as e:
                raise StorageError(f"Failed to write '{key}'", details=str(e)) from e

    def remove_item(self, key: str) -> None:
        with self._lock:
            try:
                data = self._load()
                if data.pop(key, None) is not None:
                    _replace_file(self.path, json.dumps(data))
            except OSError as e:
                raise StorageError(f"Failed to delete '{key}'", details=str(e)) from e

    async def read(self, key: str) -> str | None:
        return self.get_item(key)

    async def write(self, key: str, value: str) -> None:
        self.set_item(key, value)

    async def delete(self, key: str) -> None:
        self.remove_item(key)


class MemoryBackend(StorageBackend):
    """Deterministic in-memory store. Records every write for inspection."""

    def __init__(self, data: dict[str, str] | None = None, name: str = "memory"):
        self.data: dict[str, str] = dict(data or {})
        self.name = name
        self.writes: list[tuple[str, str]] = []
        self.reads: list[str] = []

    async def read(self, key: str) -> str | None:
        self.reads.append(key)
        return self.data.get(key)

    async def write(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)
