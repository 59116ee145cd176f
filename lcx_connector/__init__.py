"""
LCX venue connector.

Exposes the LCX exchange REST API through a vendor-neutral trading
interface: markets, currencies, tickers, order books, trades, OHLCV bars,
balances, orders and transactions as canonical Pydantic models, plus the
HMAC request-signing protocol used by the private endpoints.

This package provides:
- Canonical data models for venue payloads
- The TradingVenue and MarketCache interfaces
- The LCX adapter (signer, normalizer, error classifier, market catalog)
- Market cache backends for Redis and in-process use
- Configuration management
"""

__version__ = "0.1.0"
