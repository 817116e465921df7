"""Redis backends implementing ICacheBackend and ILeaseBackend."""

from __future__ import annotations

import uuid

import redis

from headerprop.core.exceptions import CacheError


class RedisCacheBackend:
    """Production ICacheBackend backed by Redis. Entries never expire."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 key_prefix: str = "headerprop:") -> None:
        self._host = host
        self._port = port
        self._db = db
        self._key_prefix = key_prefix
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(self._key(key))
        except Exception as exc:
            raise CacheError(f"Redis GET failed for key={key!r}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except Exception as exc:
            raise CacheError(f"Redis SET failed for key={key!r}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except Exception as exc:
            raise CacheError(f"Redis DELETE failed for key={key!r}: {exc}") from exc

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except Exception:
            return False


class RedisLeaseBackend:
    """Production ILeaseBackend using ``SET NX`` tokens.

    A ``ttl`` of None means the lease never expires and must be released.
    """

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 key_prefix: str = "headerprop:lease:") -> None:
        self._key_prefix = key_prefix
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}{key}"

    def acquire(self, key: str, ttl: int | None = None) -> str | None:
        lease_id = str(uuid.uuid4())
        try:
            acquired = self._client.set(self._key(key), lease_id, nx=True, ex=ttl)
        except Exception as exc:
            raise CacheError(f"Redis lease acquire failed for key={key!r}: {exc}") from exc
        return lease_id if acquired else None

    def release(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except Exception as exc:
            raise CacheError(f"Redis lease release failed for key={key!r}: {exc}") from exc
