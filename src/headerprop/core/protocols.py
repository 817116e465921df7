"""Protocol interfaces for all headerprop abstractions.

All inter-layer communication uses these Protocols: structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO, Iterator, Protocol, runtime_checkable

if TYPE_CHECKING:
    from headerprop.models.header import Header


# ---------------------------------------------------------------------------
# Object Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IObjectStore(Protocol):
    """Container/path addressed object store with two-phase block writes and leases."""

    def open_read(self, container: str, path: str) -> BinaryIO: ...

    def exists(self, container: str, path: str) -> bool: ...

    def list_objects(self, container: str, prefix: str) -> Iterator[str]: ...

    def stage_block(self, container: str, path: str, block_id: str, data: bytes) -> None: ...

    def commit_blocks(self, container: str, path: str, block_ids: list[str]) -> None: ...

    def acquire_lease(self, container: str, path: str, duration: int | None = None) -> str: ...

    def break_lease(self, container: str, path: str, lease_id: str | None = None) -> None: ...


# ---------------------------------------------------------------------------
# Leases
# ---------------------------------------------------------------------------

@runtime_checkable
class ILeaseBackend(Protocol):
    """Exclusive, optionally time-scoped lock tokens keyed by string."""

    def acquire(self, key: str, ttl: int | None = None) -> str | None: ...

    def release(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible string cache interface."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def ping(self) -> bool: ...


# ---------------------------------------------------------------------------
# Header Cache
# ---------------------------------------------------------------------------

@runtime_checkable
class IHeaderCache(Protocol):
    """Per-folder-prefix single-writer store of the established header."""

    async def get(self, prefix: str) -> Header | None: ...

    async def set(self, prefix: str, header: Header) -> None: ...

    async def reset(self, prefix: str) -> None: ...
