"""Object path helpers: folder prefixes and event URL parsing."""

from __future__ import annotations

from urllib.parse import unquote, urlsplit

from headerprop.core.exceptions import InvalidNotificationError
from headerprop.models.events import ObjectLocation


def folder_prefix(path: str) -> str:
    """Return the part of ``path`` before its last ``/``, or "" when there is none."""
    pos = path.rfind("/")
    return "" if pos < 0 else path[:pos]


def parse_object_url(url: str) -> ObjectLocation:
    """Map an object URL to its container and path.

    Accepts ``s3://bucket/key``, virtual-hosted ``https://bucket.s3[.region].amazonaws.com/key``
    and path-style ``https://host/bucket/key`` URLs.
    """
    parts = urlsplit(url)
    host = parts.hostname or ""
    path = unquote(parts.path).lstrip("/")

    if parts.scheme == "s3":
        container, key = host, path
    elif parts.scheme in ("http", "https") and ".s3" in host and host.endswith(".amazonaws.com"):
        container, key = host.split(".s3", 1)[0], path
    elif parts.scheme in ("http", "https"):
        container, _, key = path.partition("/")
    else:
        raise InvalidNotificationError(f"Unsupported object URL scheme: {url!r}")

    if not container or not key:
        raise InvalidNotificationError(f"Object URL has no container or path: {url!r}")
    return ObjectLocation(container=container, path=key)
