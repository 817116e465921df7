"""Per-folder-prefix header cache."""

from __future__ import annotations

import asyncio
import logging
import weakref

from pydantic import ValidationError

from headerprop.core.exceptions import CacheError
from headerprop.core.protocols import ICacheBackend
from headerprop.models.header import Header

logger = logging.getLogger(__name__)


class HeaderStatusStore:
    """IHeaderCache keeping one Header per folder prefix.

    Operations on one prefix are serialized by a per-prefix lock; different
    prefixes never wait on each other. Values are stored as JSON in the backend.
    """

    KEY_PREFIX = "header:"

    def __init__(self, backend: ICacheBackend) -> None:
        self._backend = backend
        # entries vanish once no coroutine holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock(self, prefix: str) -> asyncio.Lock:
        lock = self._locks.get(prefix)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[prefix] = lock
        return lock

    def _key(self, prefix: str) -> str:
        return f"{self.KEY_PREFIX}{prefix}"

    async def get(self, prefix: str) -> Header | None:
        async with self._lock(prefix):
            raw = await asyncio.to_thread(self._backend.get, self._key(prefix))
        if raw is None:
            return None
        try:
            return Header.model_validate_json(raw)
        except ValidationError as exc:
            raise CacheError(f"Corrupt header cache entry for prefix={prefix!r}: {exc}") from exc

    async def set(self, prefix: str, header: Header) -> None:
        if not header.is_propagatable:
            raise ValueError("Only a complete, non-empty header can be cached")
        async with self._lock(prefix):
            await asyncio.to_thread(self._backend.set, self._key(prefix), header.model_dump_json())
        logger.info("Stored header for prefix %r", prefix)

    async def reset(self, prefix: str) -> None:
        async with self._lock(prefix):
            await asyncio.to_thread(self._backend.set, self._key(prefix), Header().model_dump_json())
        logger.warning("Reset header cache entry for prefix %r", prefix)
