"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from headerprop.core.protocols import (
    ICacheBackend,
    IHeaderCache,
    ILeaseBackend,
    IObjectStore,
)

__all__ = ["ICacheBackend", "IHeaderCache", "ILeaseBackend", "IObjectStore"]
