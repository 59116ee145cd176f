"""
LCX venue adapter.

Components:
    - LCXAdapter: TradingVenue implementation wiring everything together
    - LCXNormalizer: Venue payload to canonical model conversion
    - LCXSigner: URL, body and HMAC header construction
    - LCXErrorClassifier: Error envelope to typed failure mapping
    - LCXRestClient: aiohttp transport with a fixed minimum delay
    - LCXSession: Caller-owned access token
    - MarketCatalog: Market list backed by a MarketCache

Example:
    >>> from lcx_connector.adapters.lcx import LCXAdapter
    >>> from lcx_connector.config import load_config
    >>> from lcx_connector.storage import RedisMarketCache
    >>>
    >>> config = load_config()
    >>> cache = RedisMarketCache(config.redis)
    >>> await cache.connect()
    >>> adapter = LCXAdapter(config, cache)
    >>> ticker = await adapter.fetch_ticker("ETH/BTC")
"""

from lcx_connector.adapters.lcx.adapter import LCXAdapter
from lcx_connector.adapters.lcx.catalog import MarketCatalog
from lcx_connector.adapters.lcx.errors import LCXErrorClassifier
from lcx_connector.adapters.lcx.normalizer import LCXNormalizer
from lcx_connector.adapters.lcx.rest import LCXRestClient
from lcx_connector.adapters.lcx.session import LCXSession
from lcx_connector.adapters.lcx.signer import LCXSigner, SignedRequest

__all__ = [
    "LCXAdapter",
    "LCXErrorClassifier",
    "LCXNormalizer",
    "LCXRestClient",
    "LCXSession",
    "LCXSigner",
    "MarketCatalog",
    "SignedRequest",
]
