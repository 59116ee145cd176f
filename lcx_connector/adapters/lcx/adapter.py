"""
LCX exchange adapter.

Implements the TradingVenue interface on top of the LCX REST API. Each
operation builds its request parameters, has LCXSigner produce the URL,
body and headers, sends it through LCXRestClient (which classifies error
envelopes) and hands the ``data`` payload to LCXNormalizer.

LCX-Specific Details:
    - Market data endpoints take the pair in a POST body, not the query
    - Private endpoints live under ``api/`` and are HMAC-SHA256 signed
    - The market list is cached for an hour in the injected MarketCache
    - An optional bearer token from ``sign_in`` rides along on private calls

Example:
    >>> from lcx_connector.adapters.lcx import LCXAdapter
    >>> from lcx_connector.config import load_config
    >>> from lcx_connector.storage import InMemoryMarketCache
    >>>
    >>> adapter = LCXAdapter(load_config(), InMemoryMarketCache())
    >>> book = await adapter.fetch_order_book("LCX/EUR", limit=10)
    >>> print(book.best_bid, book.best_ask)
    >>> await adapter.close()
"""

import dataclasses
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, TypeVar

import structlog

from lcx_connector.adapters.lcx.catalog import MarketCatalog
from lcx_connector.adapters.lcx.normalizer import TIMEFRAMES, LCXNormalizer
from lcx_connector.adapters.lcx.precision import (
    amount_to_precision,
    cost_to_precision,
    iso8601,
    price_to_precision,
)
from lcx_connector.adapters.lcx.rest import LCXRestClient
from lcx_connector.adapters.lcx.session import LCXSession
from lcx_connector.adapters.lcx.signer import LCXSigner, SignedRequest, milliseconds
from lcx_connector.config.models import AppConfig
from lcx_connector.exceptions import InvalidRequestError, MalformedResponseError
from lcx_connector.interfaces.market_cache import MarketCache
from lcx_connector.interfaces.trading_venue import TradingVenue
from lcx_connector.models.account import AccessToken, Balance
from lcx_connector.models.market import Currency, Market
from lcx_connector.models.order import Order
from lcx_connector.models.orderbook import OrderBook
from lcx_connector.models.ticker import OHLCV, Ticker, Trade

logger = structlog.get_logger(__name__)

T = TypeVar("T")

ORDER_TYPES = ("limit", "market")
ORDER_SIDES = ("buy", "sell")


def filter_by_since_limit(items: Sequence[T], since: Optional[int] = None, limit: Optional[int] = None) -> List[T]:
    """
    Keep items with ``timestamp >= since``, then the first ``limit`` of them.

    Items without a timestamp are dropped when ``since`` is given.
    """
    result = list(items)
    if since is not None:
        result = [
            item for item in result
            if item.timestamp is not None and item.timestamp >= since
        ]
    if limit is not None:
        result = result[:limit]
    return result


class LCXAdapter(TradingVenue):
    """
    LCX adapter implementing the TradingVenue interface.

    Attributes:
        venue_id: Always returns "lcx".
        session: Caller-owned access-token holder.
        catalog: Cached market list.

    Example:
        >>> adapter = LCXAdapter(config, cache)
        >>> markets = await adapter.fetch_markets()
        >>> order = await adapter.create_order("ETH/BTC", "limit", "buy", Decimal("1"), Decimal("0.02"))
    """

    def __init__(
        self,
        config: AppConfig,
        cache: MarketCache,
        rest: Optional[LCXRestClient] = None,
        session: Optional[LCXSession] = None,
        signer: Optional[LCXSigner] = None,
    ):
        """
        Initialize LCX adapter.

        Args:
            config: Application configuration.
            cache: Store for the market list.
            rest: Transport (built from config when omitted).
            session: Token holder shared with the caller.
            signer: Request signer (built from config credentials when omitted).
        """
        self._config = config
        exchange = config.exchange

        self._rest = rest or LCXRestClient(
            base_url=exchange.urls.public,
            rate_limit_ms=exchange.connection.rate_limit_ms,
            timeout_seconds=exchange.connection.timeout_seconds,
        )
        self._signer = signer or LCXSigner(
            urls=exchange.urls,
            api_key=config.credentials.api_key,
            secret=config.credentials.secret,
        )
        self.session = session or LCXSession()
        self._normalizer = LCXNormalizer(
            common_currencies=exchange.common_currencies,
            default_fees=exchange.fees,
        )
        self.catalog = MarketCatalog(
            rest=self._rest,
            signer=self._signer,
            cache=cache,
            normalizer=self._normalizer,
            ttl_seconds=config.cache.markets_ttl_seconds,
            cache_key=config.cache.markets_key,
        )

        logger.info(
            "lcx_adapter_initialized",
            exchange=self.venue_id,
            private_enabled=self._signer.has_credentials,
        )

    @property
    def venue_id(self) -> str:
        """Return exchange identifier."""
        return self._config.exchange.id

    @property
    def normalizer(self) -> LCXNormalizer:
        return self._normalizer

    # =========================================================================
    # REQUEST HELPERS
    # =========================================================================

    async def _public(self, path: str, method: str = "GET", params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._rest.request(self._signer.sign(path, "public", method, params))

    async def _private(self, path: str, method: str = "POST", params: Optional[Dict[str, Any]] = None) -> Any:
        """Sign a private request and attach the session token, if live."""
        signed = self._signer.sign(path, "private", method, params)
        token_headers = self.session.headers()
        if token_headers:
            signed = dataclasses.replace(signed, headers={**signed.headers, **token_headers})
        return await self._rest.request(signed)

    @staticmethod
    def _data(response: Any, default: Any = None) -> Any:
        if isinstance(response, dict):
            data = response.get("data")
            return default if data is None else data
        return default

    @staticmethod
    def _rows(response: Any, endpoint: str) -> List[Any]:
        """Return the ``data`` list of a response (an absent list is empty)."""
        data = LCXAdapter._data(response, [])
        if isinstance(data, dict):
            data = list(data.values())
        if not isinstance(data, list):
            logger.error("lcx_unexpected_payload", exchange="lcx", endpoint=endpoint, payload_type=type(data).__name__)
            raise MalformedResponseError(f"lcx {endpoint} returned {type(data).__name__}, expected a list")
        return data

    # =========================================================================
    # PUBLIC MARKET DATA
    # =========================================================================

    async def fetch_markets(self) -> List[Market]:
        """Return every tradable pair (cached for ``cache.markets_ttl_seconds``)."""
        return await self.catalog.get_markets()

    async def fetch_currencies(self) -> Dict[str, Currency]:
        """Return listed currencies keyed by unified code."""
        response = await self._public("currency", "GET")
        currencies = [self._normalizer.normalize_currency(item) for item in self._rows(response, "currency")]
        return {currency.code: currency for currency in currencies}

    async def fetch_tickers(self, symbols: Optional[List[str]] = None) -> List[Ticker]:
        """
        Return tickers of all markets.

        Args:
            symbols: Keep only these symbols (all when None).
        """
        response = await self._public("market/tickers", "GET")
        tickers = [self._normalizer.normalize_ticker(item) for item in self._rows(response, "market/tickers")]
        if symbols is not None:
            wanted = set(symbols)
            tickers = [ticker for ticker in tickers if ticker.symbol in wanted]
        return tickers

    async def fetch_ticker(self, symbol: str) -> Ticker:
        """
        Return the ticker of one market.

        Raises:
            MalformedResponseError: If the venue returns no ticker.
        """
        response = await self._public("market/ticker", "POST", {"pair": symbol})
        data = self._data(response)
        if not data:
            logger.error("ticker_empty_response", exchange="lcx", symbol=symbol)
            raise MalformedResponseError(f"lcx fetch_ticker() returned an empty response for {symbol}")
        return self._normalizer.normalize_ticker(data)

    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        """Return the order book of one market, ``limit`` levels per side."""
        response = await self._public("order/book", "POST", {"pair": symbol})
        book = self._normalizer.normalize_order_book(self._data(response, {}), symbol, limit)
        logger.debug(
            "orderbook_fetched",
            exchange="lcx",
            symbol=symbol,
            bids_count=len(book.bids),
            asks_count=len(book.asks),
        )
        return book

    async def fetch_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
        page: Optional[int] = None,
    ) -> List[Trade]:
        """
        Return recent public trades.

        Args:
            symbol: Market symbol.
            since: Earliest timestamp in ms.
            limit: Maximum number of trades.
            page: Venue result page (``offset``), 1 when omitted.
        """
        request = {"pair": symbol, "offset": page if page is not None else 1}
        response = await self._public("trade/recent", "POST", request)
        trades = [
            self._normalizer.normalize_trade(row, symbol)
            for row in self._rows(response, "trade/recent")
        ]
        trades.sort(key=lambda trade: trade.timestamp)
        return filter_by_since_limit(trades, since, limit)

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
        last: Optional[int] = None,
    ) -> List[OHLCV]:
        """
        Return candles of one market.

        Args:
            symbol: Market symbol.
            timeframe: Unified timeframe, one of ``TIMEFRAMES``.
            since: Sent as ``from`` and used to filter the result.
            limit: Maximum number of candles.
            last: Sent as ``to``.

        Raises:
            InvalidRequestError: If the timeframe is not supported.
        """
        resolution = TIMEFRAMES.get(timeframe)
        if resolution is None:
            raise InvalidRequestError(f"lcx does not support timeframe {timeframe}")

        request: Dict[str, Any] = {"pair": symbol, "resolution": resolution}
        if since is not None:
            request["from"] = since
        if last is not None:
            request["to"] = last

        response = await self._public("market/kline", "POST", request)
        rows = response if isinstance(response, list) else self._rows(response, "market/kline")
        candles = sorted(
            (self._normalizer.normalize_ohlcv(row) for row in rows),
            key=lambda candle: candle.timestamp,
        )
        return filter_by_since_limit(candles, since, limit)

    # =========================================================================
    # PRIVATE ACCOUNT AND TRADING
    # =========================================================================

    async def fetch_balance(self) -> Balance:
        """Return account balances."""
        response = await self._private("balances", "GET")
        return self._normalizer.normalize_balance(self._rows(response, "balances"))

    def _parse_orders(self, response: Any, endpoint: str, since: Optional[int], limit: Optional[int]) -> List[Order]:
        orders = [self._normalizer.normalize_order(item) for item in self._rows(response, endpoint)]
        orders.sort(key=lambda order: order.timestamp or 0)
        return filter_by_since_limit(orders, since, limit)

    @staticmethod
    def _date_range(request: Dict[str, Any], since: Optional[int]) -> None:
        if since is not None:
            request["fromDate"] = iso8601(since)
            request["toDate"] = iso8601(milliseconds())

    async def fetch_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Return working orders, optionally for one market."""
        request: Dict[str, Any] = {}
        if symbol is not None:
            request["pair"] = symbol
        request["offset"] = 1
        self._date_range(request, since)

        response = await self._private("open", "POST", request)
        return self._parse_orders(response, "open", since, limit)

    async def fetch_closed_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Return fully filled orders from the order history."""
        request: Dict[str, Any] = {}
        if symbol is not None:
            request["pair"] = symbol
            request["offset"] = 1
        self._date_range(request, since)

        response = await self._private("orderHistory", "POST", request)
        orders = self._parse_orders(response, "orderHistory", since, None)
        closed = [order for order in orders if order.status == "closed"]
        return closed[:limit] if limit is not None else closed

    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """
        Return the account's order history.

        The venue has no fills endpoint, so history entries are returned as
        orders.
        """
        request: Dict[str, Any] = {}
        if symbol is not None:
            request["pair"] = symbol
            request["offset"] = 1

        response = await self._private("orderHistory", "POST", request)
        return self._parse_orders(response, "orderHistory", since, limit)

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: Decimal,
        price: Optional[Decimal] = None,
    ) -> Order:
        """
        Submit a new order.

        Amount and price are truncated to the market's precision, never
        rounded up. When a price is given, the truncated cost must reach the
        market's minimum cost.

        Args:
            symbol: Unified symbol or venue id.
            type: "limit" or "market".
            side: "buy" or "sell".
            amount: Base currency amount.
            price: Limit price (required for limit orders and, when
                ``create_market_buy_order_requires_price`` is set, market buys).

        Raises:
            InvalidRequestError: If type, side, amount, price or cost are invalid.
            UnknownSymbolError: If the market does not exist.
        """
        order_type = type.lower()
        order_side = side.lower()
        if order_type not in ORDER_TYPES:
            raise InvalidRequestError(f"lcx does not support order type {type}")
        if order_side not in ORDER_SIDES:
            raise InvalidRequestError(f"lcx does not support order side {side}")
        if order_type == "limit" and price is None:
            raise InvalidRequestError("lcx limit orders require a price")
        if (
            order_type == "market"
            and order_side == "buy"
            and price is None
            and self._config.exchange.options.create_market_buy_order_requires_price
        ):
            raise InvalidRequestError("lcx market buy orders require a price")

        market = await self.catalog.get_market(symbol)
        request: Dict[str, Any] = {
            "Pair": market.id,
            "Amount": amount_to_precision(market, amount),
            "OrderType": order_type.upper(),
            "Side": order_side.upper(),
        }
        cost = None
        if price is not None:
            request["Price"] = price_to_precision(market, price)
            cost = cost_to_precision(market, request["Amount"] * request["Price"])
            min_cost = market.limits.cost.min
            if min_cost is not None and cost < min_cost:
                raise InvalidRequestError(
                    f"lcx order cost {cost} is below the {market.symbol} minimum of {min_cost}"
                )

        response = await self._private("create", "POST", request)
        order = self._normalizer.normalize_order(self._data(response))

        logger.info(
            "order_created",
            exchange="lcx",
            order_id=order.id,
            symbol=market.symbol,
            type=order_type,
            side=order_side,
            amount=str(request["Amount"]),
            cost=str(cost) if cost is not None else None,
        )
        return order

    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """Cancel a working order by venue order id."""
        response = await self._private("cancel", "POST", {"OrderId": id})
        order = self._normalizer.normalize_order(self._data(response))
        logger.info("order_canceled", exchange="lcx", order_id=id, symbol=symbol)
        return order

    async def sign_in(self) -> AccessToken:
        """
        Obtain an access token through the client-credentials grant.

        The token is stored on ``session`` and attached to later private calls
        until it expires.

        Raises:
            AuthenticationError: If credentials are missing or rejected.
        """
        self._signer.check_required_credentials()
        self.session.clear()
        signed: SignedRequest = self._signer.sign(
            "token",
            "accounts",
            "POST",
            {"grant_type": "client_credentials"},
        )
        response = await self._rest.request(signed)
        payload = response if isinstance(response, dict) and "access_token" in response else self._data(response, {})
        return self.session.store(payload)

    async def close(self) -> None:
        """Close the HTTP session."""
        await self._rest.close()
        logger.info("lcx_adapter_closed", exchange=self.venue_id)
