"""Shared test doubles: re-export memory backends."""

from __future__ import annotations

from headerprop.persistence.memory_backend import (
    MemoryCacheBackend,
    MemoryLeaseBackend,
    MemoryObjectStore,
)

__all__ = ["MemoryCacheBackend", "MemoryLeaseBackend", "MemoryObjectStore"]
