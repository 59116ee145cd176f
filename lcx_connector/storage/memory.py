"""
In-process market cache.

Useful for scripts and tests that run a single connector and have no Redis.
Entries expire on read, measured with ``time.monotonic``.
"""

import copy
import time
from typing import Any, Callable, Dict, Optional, Tuple

import structlog

from lcx_connector.interfaces.market_cache import MarketCache

logger = structlog.get_logger(__name__)


class InMemoryMarketCache(MarketCache):
    """
    Dict-backed MarketCache.

    Values are deep-copied on the way in and out so callers cannot mutate
    cached entries.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._clock = clock or time.monotonic

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            logger.debug("cache_key_expired", key=key)
            return None
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, copy.deepcopy(value))

    def __len__(self) -> int:
        return len(self._entries)
