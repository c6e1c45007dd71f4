"""
Availability Cache Module

Stores lookup results in a single JSON file keyed by "<platform>:<identifier>".
Each entry records when it was written; expiry is decided when reading, so a
stale entry stays on disk until the whole cache is cleared.

File format:
{
    "registry:left-pad": {"timestamp": 1700000000000, "data": {...}},
    "repo-host:octocat/hello": {"timestamp": 1700000000000, "data": {...}}
}
"""

import json
import logging
import time
from pathlib import Path
from typing import Any

import anyio

from .config import get_cache_file

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class CacheStore:
    """
    TTL-aware key-value store backed by one JSON file.

    Every call reads the whole file and every write rewrites it. A missing or
    corrupt file is an empty cache.

    Usage:
        cache = CacheStore()
        await cache.set("registry:left-pad", {"available": True})
        data = await cache.get("registry:left-pad", ttl=60 * 60 * 1000)
    """

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = anyio.Path(path if path is not None else get_cache_file())

    @property
    def path(self) -> Path:
        return Path(self._path)

    async def _ensure_dir(self) -> None:
        await self._path.parent.mkdir(parents=True, exist_ok=True)

    async def _load(self) -> dict[str, dict]:
        """Load the cache from disk, returning {} if not found or invalid."""
        try:
            await self._ensure_dir()
            if not await self._path.exists():
                return {}
            data = json.loads(await self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            logger.debug("Ignoring unreadable cache file %s", self._path)
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    async def _save(self, cache: dict[str, dict]) -> None:
        await self._ensure_dir()
        await self._path.write_text(json.dumps(cache, indent=2), encoding="utf-8")

    async def get(self, key: str, ttl: int) -> Any | None:
        """
        Get cached data for a key.

        Args:
            key: Cache key, e.g. "registry:left-pad"
            ttl: Maximum age in milliseconds

        Returns:
            The stored data, or None if absent or older than ttl.
        """
        entry = (await self._load()).get(key)
        if not isinstance(entry, dict) or "data" not in entry:
            return None

        try:
            age = _now_ms() - int(entry.get("timestamp", 0))
        except (TypeError, ValueError):
            return None

        if age > ttl:
            logger.debug("Cache entry %s expired (%d ms old)", key, age)
            return None
        return entry["data"]

    async def set(self, key: str, data: Any) -> None:
        """Store data under key with the current timestamp."""
        cache = await self._load()
        cache[key] = {"timestamp": _now_ms(), "data": data}
        await self._save(cache)

    async def list(self) -> dict[str, dict]:
        """Return every entry, including expired ones."""
        return await self._load()

    async def clear(self) -> None:
        """Remove the cache file."""
        await self._path.unlink(missing_ok=True)
