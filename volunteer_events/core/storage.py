"""
Persistent key-value storage used for the event cache and the session.

The core only depends on the KeyValueStore protocol; the app injects
whichever backend the platform provides.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Iterable, Protocol

from volunteer_events.config import get_settings

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Async string store: get / set / remove."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, keys: Iterable[str]) -> None: ...


class MemoryStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._data.pop(key, None)


class JsonFileStore:
    """Store persisted as a single JSON object on disk.

    File access runs in a worker thread so the event loop is never blocked.
    Writes go to a temp file first and are then moved into place, so a crash
    mid-write leaves the previous snapshot intact.

    `path` defaults to the STORE_PATH setting.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or get_settings().STORE_PATH)
        self._lock = asyncio.Lock()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Store file {self.path} is corrupted, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        tmp.replace(self.path)

    async def get(self, key: str) -> str | None:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            data[key] = value
            await asyncio.to_thread(self._write_all, data)

    async def remove(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            for key in keys:
                data.pop(key, None)
            await asyncio.to_thread(self._write_all, data)
