"""
Key-value persistence for conversations and host state.

Values are JSON documents; the store is opaque to what they contain.
JsonFileStore keeps one <key>.json file per key and replaces it atomically
on every write, so a crash leaves either the old or the new value.
"""

import asyncio
import copy
import json
import logging
import os
import re
from typing import Any, Protocol

import aiofiles
import aiofiles.os

from ..exceptions import StorageError

logger = logging.getLogger(__name__)

# Validate keys to prevent path traversal
_KEY_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def validate_key(key: str) -> bool:
    return bool(key) and len(key) <= 64 and bool(_KEY_RE.match(key))


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...


class InMemoryStore:
    """Process-local store; values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStore:
    """One JSON file per key under `root_dir`."""

    def __init__(self, root_dir: str) -> None:
        self.root_dir = root_dir
        os.makedirs(root_dir, exist_ok=True)
        # Per-key locks to prevent concurrent writes to the same file
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def _path(self, key: str) -> str:
        if not validate_key(key):
            raise StorageError(f"Invalid store key: {key!r}")
        return os.path.join(self.root_dir, f"{key}.json")

    async def get(self, key: str) -> Any | None:
        path = self._path(key)
        async with self._lock(key):
            if not os.path.exists(path):
                return None
            try:
                async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                    raw = await f.read()
            except OSError as e:
                logger.error("Could not read %s: %s", path, e)
                raise StorageError(f"Could not read {key}: {e}") from e
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Corrupt store file %s: %s", path, e)
            raise StorageError(f"Corrupt value for {key}: {e}") from e

    async def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path + ".tmp"
        data = json.dumps(value, ensure_ascii=False)
        async with self._lock(key):
            try:
                async with aiofiles.open(tmp_path, mode="w", encoding="utf-8") as f:
                    await f.write(data)
                await aiofiles.os.replace(tmp_path, path)
            except OSError as e:
                logger.error("Could not write %s: %s", path, e)
                raise StorageError(f"Could not write {key}: {e}") from e
