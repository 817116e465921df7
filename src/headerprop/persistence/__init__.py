"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from headerprop.core.config import AppSettings
from headerprop.persistence.redis_backend import RedisCacheBackend, RedisLeaseBackend
from headerprop.persistence.s3_backend import S3ObjectStore


def create_persistence(settings: AppSettings | None = None):
    """Create wired-up persistence backends from application settings.

    Returns:
        Tuple of (object_store, cache).
    """
    if settings is None:
        settings = AppSettings()

    cache = RedisCacheBackend(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        key_prefix=settings.redis.key_prefix,
    )

    leases = RedisLeaseBackend(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        key_prefix=f"{settings.redis.key_prefix}lease:",
    )

    object_store = S3ObjectStore(
        leases=leases,
        region=settings.storage.region,
        endpoint_url=settings.storage.endpoint_url,
        staging_prefix=settings.storage.staging_prefix,
    )

    return object_store, cache
