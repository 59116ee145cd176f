"""
Abstract interfaces.

Interfaces:
    TradingVenue: Contract every venue adapter implements
    MarketCache: Key/value store with expiry used by the market catalog
"""

from lcx_connector.interfaces.market_cache import MarketCache
from lcx_connector.interfaces.trading_venue import TradingVenue

__all__ = [
    "MarketCache",
    "TradingVenue",
]
