"""
Redis-backed market cache.

Stores JSON documents under plain string keys with ``SETEX`` so the market
list expires on its own. Several connector processes can share one Redis
and reuse each other's market list.

Key Patterns:
    - Market list: ``{exchange}|markets`` (string, JSON array, with TTL)

Note:
    Decimal values are serialized as strings to preserve precision.

Example:
    >>> from lcx_connector.config.models import RedisConnectionConfig
    >>> from lcx_connector.storage.redis_client import RedisMarketCache
    >>>
    >>> cache = RedisMarketCache(RedisConnectionConfig(url="redis://localhost:6379"))
    >>> await cache.connect()
    >>> await cache.set("lcx|markets", [{"id": "ETH/BTC"}], 3600)
    >>> await cache.get("lcx|markets")
    [{'id': 'ETH/BTC'}]
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Optional

import structlog
from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, TimeoutError as RedisTimeoutError

from lcx_connector.config.models import RedisConnectionConfig
from lcx_connector.interfaces.market_cache import MarketCache

logger = structlog.get_logger(__name__)


class RedisClientError(Exception):
    """Base exception for Redis client errors."""


class RedisConnectionException(RedisClientError):
    """Raised when Redis connection fails."""


class RedisOperationError(RedisClientError):
    """Raised when a Redis operation fails."""


def _decimal_serializer(obj: Any) -> str:
    """JSON serializer that keeps Decimal values exact as strings."""
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


class RedisMarketCache(MarketCache):
    """
    MarketCache implementation on redis-py asyncio.

    Attributes:
        config: Redis connection configuration.

    Example:
        >>> cache = RedisMarketCache(config)
        >>> await cache.connect()
        >>> try:
        ...     markets = await cache.get("lcx|markets")
        ... finally:
        ...     await cache.disconnect()
    """

    def __init__(self, config: RedisConnectionConfig) -> None:
        """
        Initialize the cache.

        Args:
            config: Redis connection configuration containing URL, db, and pool settings.
        """
        self.config = config
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None  # type: ignore[type-arg]
        self._connected: bool = False

        logger.info(
            "redis_cache_initialized",
            url=config.url,
            db=config.db,
            max_connections=config.max_connections,
        )

    @property
    def is_connected(self) -> bool:
        """True if connected to Redis."""
        return self._connected and self._client is not None

    async def connect(self) -> None:
        """
        Establish connection to Redis and verify it with PING.

        Raises:
            RedisConnectionException: If connection fails.
        """
        if self._connected:
            logger.warning("redis_already_connected")
            return

        try:
            self._pool = ConnectionPool.from_url(
                self.config.url,
                db=self.config.db,
                max_connections=self.config.max_connections,
                socket_timeout=self.config.socket_timeout,
                socket_connect_timeout=self.config.socket_timeout,
                decode_responses=True,
            )
            self._client = Redis(connection_pool=self._pool)

            await self._client.ping()
            self._connected = True

            logger.info("redis_connected", url=self.config.url, db=self.config.db)

        except (RedisConnectionError, RedisTimeoutError, OSError) as e:
            self._connected = False
            logger.error("redis_connection_failed", url=self.config.url, error=str(e))
            raise RedisConnectionException(
                f"Failed to connect to Redis at {self.config.url}: {e}"
            ) from e

    async def disconnect(self) -> None:
        """
        Close the client and the connection pool.

        Safe to call multiple times.
        """
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.warning("redis_close_error", error=str(e))
            finally:
                self._client = None

        if self._pool is not None:
            try:
                await self._pool.aclose()
            except RedisError as e:
                logger.warning("redis_pool_close_error", error=str(e))
            finally:
                self._pool = None

        self._connected = False
        logger.info("redis_disconnected")

    async def ping(self) -> bool:
        """Return True if Redis answers PING."""
        if not self._client:
            return False

        try:
            await self._client.ping()
            return True
        except RedisError as e:
            logger.warning("redis_ping_failed", error=str(e))
            return False

    def _require_connection(self) -> Redis:  # type: ignore[type-arg]
        """
        Raises:
            RedisConnectionException: If not connected.
        """
        if not self._connected or self._client is None:
            raise RedisConnectionException("Redis client is not connected")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        """
        Return the JSON document stored under ``key``.

        Raises:
            RedisConnectionException: If not connected.
            RedisOperationError: If the read fails or the value is not JSON.
        """
        client = self._require_connection()

        try:
            data = await client.get(key)
        except RedisError as e:
            logger.error("cache_get_failed", key=key, error=str(e))
            raise RedisOperationError(f"Failed to read {key}: {e}") from e

        if data is None:
            logger.debug("cache_key_not_found", key=key)
            return None

        try:
            return json.loads(data)
        except ValueError as e:
            logger.error("cache_value_invalid", key=key, error=str(e))
            raise RedisOperationError(f"Value under {key} is not JSON: {e}") from e

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store ``value`` as JSON under ``key`` with SETEX.

        Raises:
            RedisConnectionException: If not connected.
            RedisOperationError: If the write fails.
        """
        client = self._require_connection()
        payload = json.dumps(value, default=_decimal_serializer)

        try:
            await client.setex(key, ttl_seconds, payload)
        except RedisError as e:
            logger.error("cache_set_failed", key=key, error=str(e))
            raise RedisOperationError(f"Failed to write {key}: {e}") from e

        logger.debug("cache_key_stored", key=key, ttl=ttl_seconds, size=len(payload))

    def __repr__(self) -> str:
        """Return string representation."""
        return f"RedisMarketCache(url={self.config.url}, connected={self._connected})"
