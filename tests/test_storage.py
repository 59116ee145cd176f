"""Tests for the market cache backends."""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import RedisError

from lcx_connector.config.models import AppConfig, CacheBackend, CacheConfig, RedisConnectionConfig
from lcx_connector.storage import (
    InMemoryMarketCache,
    RedisConnectionException,
    RedisMarketCache,
    RedisOperationError,
    create_market_cache,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryMarketCache:
    @pytest.mark.asyncio
    async def test_expiry(self):
        clock = FakeClock()
        cache = InMemoryMarketCache(clock=clock)
        await cache.set("k", [{"a": 1}], ttl_seconds=10)

        clock.now = 109.9
        assert await cache.get("k") == [{"a": 1}]

        clock.now = 110.0
        assert await cache.get("k") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_missing_key(self):
        assert await InMemoryMarketCache().get("absent") is None

    @pytest.mark.asyncio
    async def test_values_are_copied(self):
        cache = InMemoryMarketCache()
        value = [{"a": 1}]
        await cache.set("k", value, 60)
        value[0]["a"] = 2

        stored = await cache.get("k")
        stored[0]["a"] = 3
        assert await cache.get("k") == [{"a": 1}]


@pytest.fixture
def redis_cache() -> RedisMarketCache:
    cache = RedisMarketCache(RedisConnectionConfig(url="redis://localhost:6379"))
    cache._client = AsyncMock()
    cache._connected = True
    return cache


class TestRedisMarketCache:
    @pytest.mark.asyncio
    async def test_requires_connection(self):
        cache = RedisMarketCache(RedisConnectionConfig())
        assert not cache.is_connected
        with pytest.raises(RedisConnectionException):
            await cache.get("k")
        assert await cache.ping() is False

    @pytest.mark.asyncio
    async def test_set_uses_setex_with_json(self, redis_cache):
        await redis_cache.set("lcx|markets", [{"taker": Decimal("0.002")}], 3600)

        redis_cache._client.setex.assert_awaited_once()
        key, ttl, payload = redis_cache._client.setex.await_args.args
        assert key == "lcx|markets"
        assert ttl == 3600
        assert json.loads(payload) == [{"taker": "0.002"}]

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, redis_cache):
        redis_cache._client.get.return_value = '[{"id": "ETH/BTC"}]'
        assert await redis_cache.get("lcx|markets") == [{"id": "ETH/BTC"}]

    @pytest.mark.asyncio
    async def test_get_miss(self, redis_cache):
        redis_cache._client.get.return_value = None
        assert await redis_cache.get("lcx|markets") is None

    @pytest.mark.asyncio
    async def test_get_invalid_json(self, redis_cache):
        redis_cache._client.get.return_value = "{oops"
        with pytest.raises(RedisOperationError):
            await redis_cache.get("lcx|markets")

    @pytest.mark.asyncio
    async def test_redis_errors_are_wrapped(self, redis_cache):
        redis_cache._client.get.side_effect = RedisError("down")
        redis_cache._client.setex.side_effect = RedisError("down")
        with pytest.raises(RedisOperationError):
            await redis_cache.get("k")
        with pytest.raises(RedisOperationError):
            await redis_cache.set("k", [], 1)

    @pytest.mark.asyncio
    async def test_disconnect(self, redis_cache):
        client = redis_cache._client
        await redis_cache.disconnect()
        await redis_cache.disconnect()

        client.aclose.assert_awaited_once()
        assert not redis_cache.is_connected


class TestCreateMarketCache:
    def test_backend_selection(self):
        assert isinstance(create_market_cache(AppConfig()), RedisMarketCache)
        memory = AppConfig(cache=CacheConfig(backend=CacheBackend.MEMORY))
        assert isinstance(create_market_cache(memory), InMemoryMarketCache)
