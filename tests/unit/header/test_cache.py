"""Tests for HeaderStatusStore over memory and Redis backends."""

from __future__ import annotations

import asyncio
import gc
from unittest.mock import patch

import fakeredis
import pytest

from headerprop.core.exceptions import CacheError
from headerprop.core.protocols import IHeaderCache
from headerprop.header.cache import HeaderStatusStore
from headerprop.models.header import Header
from headerprop.persistence.redis_backend import RedisCacheBackend
from tests.fakes import MemoryCacheBackend


@pytest.fixture
def backend():
    return MemoryCacheBackend()


@pytest.fixture
def cache(backend):
    return HeaderStatusStore(backend)


def test_satisfies_protocol(cache):
    assert isinstance(cache, IHeaderCache)


class TestGetSet:
    def test_absent_prefix_returns_none(self, cache):
        assert asyncio.run(cache.get("docs")) is None

    def test_set_then_get_returns_same_header(self, cache, full_header):
        async def scenario():
            await cache.set("docs", full_header)
            return await cache.get("docs")

        assert asyncio.run(scenario()) == full_header

    def test_root_prefix(self, cache, full_header):
        async def scenario():
            await cache.set("", full_header)
            return await cache.get("")

        assert asyncio.run(scenario()) == full_header

    def test_partial_header_rejected(self, cache):
        partial = Header(lines=["LICENSE: MIT\n"], is_complete=False)
        with pytest.raises(ValueError):
            asyncio.run(cache.set("docs", partial))

    def test_empty_header_rejected(self, cache):
        with pytest.raises(ValueError):
            asyncio.run(cache.set("docs", Header(is_complete=True)))

    def test_prefixes_are_independent(self, cache):
        headers = {f"folder{i}": Header(lines=[f"LICENSE: {i}\n"], is_complete=True) for i in range(20)}

        async def scenario():
            await asyncio.gather(*(cache.set(p, h) for p, h in headers.items()))
            return {p: await cache.get(p) for p in headers}

        assert asyncio.run(scenario()) == headers

    def test_idle_prefix_locks_are_released(self, cache):
        headers = {f"folder{i}": Header(lines=[f"LICENSE: {i}\n"], is_complete=True) for i in range(20)}

        async def scenario():
            await asyncio.gather(*(cache.set(p, h) for p, h in headers.items()))
            await asyncio.gather(*(cache.reset(p) for p in headers))

        asyncio.run(scenario())
        gc.collect()
        assert len(cache._locks) == 0

    def test_corrupt_entry_raises_cache_error(self, cache, backend):
        backend.set("header:docs", "{not json")
        with pytest.raises(CacheError):
            asyncio.run(cache.get("docs"))


class TestReset:
    def test_reset_leaves_empty_header(self, cache, full_header):
        async def scenario():
            await cache.set("docs", full_header)
            await cache.reset("docs")
            return await cache.get("docs")

        header = asyncio.run(scenario())
        assert header is not None
        assert not header.has_header

    def test_reset_other_prefix_untouched(self, cache, full_header):
        async def scenario():
            await cache.set("docs", full_header)
            await cache.reset("other")
            return await cache.get("docs")

        assert asyncio.run(scenario()) == full_header


class TestRedisBacked:
    @pytest.fixture
    def redis_backend(self):
        fake = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
        with patch("redis.Redis", return_value=fake):
            yield RedisCacheBackend(key_prefix="hp:"), fake

    def test_round_trip(self, redis_backend, full_header):
        backend, _ = redis_backend
        cache = HeaderStatusStore(backend)

        async def scenario():
            await cache.set("a/b", full_header)
            return await cache.get("a/b")

        assert asyncio.run(scenario()) == full_header

    def test_stored_as_json_under_prefixed_key(self, redis_backend, full_header):
        backend, fake = redis_backend
        asyncio.run(HeaderStatusStore(backend).set("a/b", full_header))
        assert Header.model_validate_json(fake.get("hp:header:a/b")) == full_header
