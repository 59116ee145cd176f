"""
Market cache backends.

Backends:
    RedisMarketCache: Shared cache on redis-py asyncio
    InMemoryMarketCache: Per-process dict with monotonic expiry
"""

from lcx_connector.config.models import AppConfig, CacheBackend
from lcx_connector.interfaces.market_cache import MarketCache
from lcx_connector.storage.memory import InMemoryMarketCache
from lcx_connector.storage.redis_client import (
    RedisClientError,
    RedisConnectionException,
    RedisMarketCache,
    RedisOperationError,
)


def create_market_cache(config: AppConfig) -> MarketCache:
    """
    Build the cache selected by ``config.cache.backend``.

    A Redis cache still has to be connected with ``await cache.connect()``.
    """
    if config.cache.backend == CacheBackend.REDIS:
        return RedisMarketCache(config.redis)
    return InMemoryMarketCache()


__all__ = [
    "InMemoryMarketCache",
    "RedisClientError",
    "RedisConnectionException",
    "RedisMarketCache",
    "RedisOperationError",
    "create_market_cache",
]
