"""In-memory backends for unit tests: dict-backed fakes."""

from __future__ import annotations

import io
import threading
import uuid
from typing import BinaryIO, Iterator

from headerprop.core.exceptions import LeaseConflictError, ObjectStoreError


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def ping(self) -> bool:
        return True


class MemoryLeaseBackend:
    """Dict-backed ILeaseBackend for unit tests. TTLs are ignored."""

    def __init__(self) -> None:
        self._leases: dict[str, str] = {}
        self._lock = threading.Lock()

    def acquire(self, key: str, ttl: int | None = None) -> str | None:
        with self._lock:
            if key in self._leases:
                return None
            lease_id = str(uuid.uuid4())
            self._leases[key] = lease_id
            return lease_id

    def release(self, key: str) -> None:
        with self._lock:
            self._leases.pop(key, None)

    def held(self, key: str) -> bool:
        return key in self._leases


class MemoryObjectStore:
    """Dict-backed IObjectStore for unit tests.

    Staged blocks live per (container, path) until committed, like uncommitted
    blocks of a block blob.
    """

    def __init__(self, leases: MemoryLeaseBackend | None = None) -> None:
        self._objects: dict[tuple[str, str], bytes] = {}
        self._staged: dict[tuple[str, str], dict[str, bytes]] = {}
        self._lock = threading.Lock()
        self.leases = leases or MemoryLeaseBackend()
        self.commits: list[tuple[str, str, list[str]]] = []

    # ---- test helpers ----

    def put(self, container: str, path: str, data: bytes) -> None:
        with self._lock:
            self._objects[(container, path)] = data

    def read(self, container: str, path: str) -> bytes:
        try:
            return self._objects[(container, path)]
        except KeyError:
            raise ObjectStoreError(f"No such object {container}/{path}") from None

    def staged_blocks(self, container: str, path: str) -> dict[str, bytes]:
        return dict(self._staged.get((container, path), {}))

    # ---- IObjectStore ----

    def open_read(self, container: str, path: str) -> BinaryIO:
        return io.BytesIO(self.read(container, path))

    def exists(self, container: str, path: str) -> bool:
        return (container, path) in self._objects

    def list_objects(self, container: str, prefix: str) -> Iterator[str]:
        with self._lock:
            paths = sorted(p for c, p in self._objects if c == container and p.startswith(prefix))
        yield from paths

    def stage_block(self, container: str, path: str, block_id: str, data: bytes) -> None:
        with self._lock:
            self._staged.setdefault((container, path), {})[block_id] = bytes(data)

    def commit_blocks(self, container: str, path: str, block_ids: list[str]) -> None:
        with self._lock:
            staged = self._staged.pop((container, path), {})
            missing = [b for b in block_ids if b not in staged]
            if missing:
                raise ObjectStoreError(f"Uncommitted block(s) {missing} not staged for {container}/{path}")
            self._objects[(container, path)] = b"".join(staged[b] for b in block_ids)
            self.commits.append((container, path, list(block_ids)))

    def acquire_lease(self, container: str, path: str, duration: int | None = None) -> str:
        lease_id = self.leases.acquire(f"{container}/{path}", ttl=duration)
        if lease_id is None:
            raise LeaseConflictError(container, path)
        return lease_id

    def break_lease(self, container: str, path: str, lease_id: str | None = None) -> None:
        self.leases.release(f"{container}/{path}")
