"""headerprop exception hierarchy."""

from __future__ import annotations


class HeaderPropError(Exception):
    """Base exception for all headerprop errors."""


class ConfigurationError(HeaderPropError):
    """Required configuration is missing or invalid."""


class ObjectStoreError(HeaderPropError):
    """Object store operation failed."""


class LeaseConflictError(ObjectStoreError):
    """The object is already leased by another writer."""

    def __init__(self, container: str, path: str) -> None:
        self.container = container
        self.path = path
        super().__init__(f"Lease already held on {container}/{path}")


class CacheError(HeaderPropError):
    """Cache backend operation failed."""


class InvalidNotificationError(HeaderPropError):
    """Notification payload cannot be mapped to an object location."""


class PropagationError(HeaderPropError):
    """One or more copy operations of a propagation run failed."""

    def __init__(self, failures: list[BaseException]) -> None:
        self.failures = failures
        super().__init__(f"{len(failures)} copy operation(s) failed: {failures[0]!r}")
