"""
LCX market catalog.

Serves the tradable-pair list from the injected MarketCache and falls back
to ``GET market/pairs`` on a miss. The cache holds the JSON dump of the
normalized markets, so any process sharing the store can revalidate them
without calling the venue.
"""

from typing import Any, List

import structlog
from pydantic import ValidationError

from lcx_connector.adapters.lcx.normalizer import LCXNormalizer
from lcx_connector.adapters.lcx.rest import LCXRestClient
from lcx_connector.adapters.lcx.signer import LCXSigner
from lcx_connector.exceptions import MalformedResponseError, UnknownSymbolError
from lcx_connector.interfaces.market_cache import MarketCache
from lcx_connector.models.market import Market

logger = structlog.get_logger(__name__)


class MarketCatalog:
    """
    Cached list of LCX markets.

    Attributes:
        ttl_seconds: Lifetime of a cached market list.
        cache_key: Key the list is stored under.

    Example:
        >>> catalog = MarketCatalog(rest, signer, cache, LCXNormalizer())
        >>> markets = await catalog.get_markets()
        >>> market = await catalog.get_market("ETH/BTC")
    """

    def __init__(
        self,
        rest: LCXRestClient,
        signer: LCXSigner,
        cache: MarketCache,
        normalizer: LCXNormalizer,
        ttl_seconds: int = 3600,
        cache_key: str = "lcx|markets",
    ):
        self._rest = rest
        self._signer = signer
        self._cache = cache
        self._normalizer = normalizer
        self.ttl_seconds = ttl_seconds
        self.cache_key = cache_key

    async def get_markets(self) -> List[Market]:
        """
        Return every market, from cache when possible.

        Network, venue and parse errors propagate; the cache is only
        written after every pair has been normalized.

        Raises:
            MalformedResponseError: If the venue payload or the cached value is invalid.
        """
        cached = await self._cache.get(self.cache_key)
        if cached is not None:
            try:
                markets = [Market.model_validate(item) for item in cached]
            except (ValidationError, TypeError) as e:
                logger.error("markets_cache_invalid", exchange="lcx", key=self.cache_key, error=str(e))
                raise MalformedResponseError(f"Cached markets under {self.cache_key} are invalid: {e}") from e
            logger.debug("markets_cache_hit", exchange="lcx", key=self.cache_key, count=len(markets))
            return markets

        logger.debug("markets_cache_miss", exchange="lcx", key=self.cache_key)
        response = await self._rest.request(self._signer.sign("market/pairs", "public", "GET"))
        pairs = self._data(response)
        markets = [self._normalizer.normalize_market(pair) for pair in pairs]

        await self._cache.set(
            self.cache_key,
            [market.model_dump(mode="json") for market in markets],
            self.ttl_seconds,
        )
        logger.info("markets_loaded", exchange="lcx", count=len(markets), ttl=self.ttl_seconds)
        return markets

    async def get_market(self, symbol: str) -> Market:
        """
        Resolve a market by unified symbol or venue id.

        Raises:
            UnknownSymbolError: If no market matches.
        """
        markets = await self.get_markets()
        for market in markets:
            if market.symbol == symbol:
                return market
        for market in markets:
            if market.id == symbol:
                return market
        logger.warning("market_not_found", exchange="lcx", symbol=symbol)
        raise UnknownSymbolError(f"lcx does not have market symbol {symbol}")

    @staticmethod
    def _data(response: Any) -> List[Any]:
        data = response.get("data") if isinstance(response, dict) else None
        if not isinstance(data, list):
            raise MalformedResponseError("market/pairs response has no data list")
        return data
