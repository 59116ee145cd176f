"""
Abstract key/value cache used by the market catalog.

The catalog only needs ``get`` and ``set``-with-expiry, so any store that
offers atomic per-key reads and writes can back it (Redis in production, a
dict in tests). The connector itself takes no locks around the cache.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class MarketCache(ABC):
    """
    Key/value store with per-key expiry.

    Values are JSON-compatible structures (lists, dicts, strings, numbers).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Return the value stored under ``key``.

        Returns:
            Optional[Any]: The stored value, or None if absent or expired.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store ``value`` under ``key`` for ``ttl_seconds``.

        Overwrites any previous value.
        """

    def __repr__(self) -> str:
        """Return string representation of the cache."""
        return f"{self.__class__.__name__}()"
