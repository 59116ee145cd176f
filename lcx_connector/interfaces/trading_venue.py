"""
Abstract base class for venue adapters.

This module defines the TradingVenue interface that a venue-specific
implementation must follow so callers see the same canonical models
whichever venue sits behind it.

The adapter pattern allows the system to:
- Add new venues without modifying caller logic
- Normalize venue payloads into unified models (Market, Ticker, Order, ...)
- Keep signing and error mapping inside the venue implementation

Example:
    >>> class MyVenue(TradingVenue):
    ...     async def fetch_ticker(self, symbol: str) -> Ticker:
    ...         payload = await self._rest.request(...)
    ...         return self._normalizer.normalize_ticker(payload)
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional

from lcx_connector.models.account import AccessToken, Balance
from lcx_connector.models.market import Currency, Market
from lcx_connector.models.order import Order
from lcx_connector.models.orderbook import OrderBook
from lcx_connector.models.ticker import OHLCV, Ticker, Trade


class TradingVenue(ABC):
    """
    Abstract base class for venue adapters.

    Every operation issues at most one outbound request and returns frozen
    canonical models. Venue error envelopes surface as subclasses of
    ``lcx_connector.exceptions.ExchangeError``; nothing is retried.

    Attributes:
        venue_id: Lowercase venue identifier (e.g., "lcx").
    """

    @property
    @abstractmethod
    def venue_id(self) -> str:
        """
        Return the lowercase venue identifier.

        Used as a prefix in cache keys and as a field in log events.
        """

    # -------------------------------------------------------------------------
    # Public market data
    # -------------------------------------------------------------------------

    @abstractmethod
    async def fetch_markets(self) -> List[Market]:
        """
        Return every tradable pair.

        Implementations should serve repeated calls from a cache.
        """

    @abstractmethod
    async def fetch_currencies(self) -> Dict[str, Currency]:
        """Return listed currencies keyed by unified code."""

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Ticker:
        """
        Return the ticker of one market.

        Raises:
            MalformedResponseError: If the venue returns an empty payload.
        """

    @abstractmethod
    async def fetch_tickers(self, symbols: Optional[List[str]] = None) -> List[Ticker]:
        """Return tickers for all markets, optionally filtered by symbol."""

    @abstractmethod
    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        """Return the order book of one market, truncated to ``limit`` levels per side."""

    @abstractmethod
    async def fetch_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trade]:
        """Return recent public trades of one market."""

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[OHLCV]:
        """
        Return candles of one market.

        Raises:
            InvalidRequestError: If the timeframe is not supported.
        """

    # -------------------------------------------------------------------------
    # Private account and trading
    # -------------------------------------------------------------------------

    @abstractmethod
    async def fetch_balance(self) -> Balance:
        """Return account balances."""

    @abstractmethod
    async def fetch_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Return working orders."""

    @abstractmethod
    async def fetch_closed_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Return fully filled orders."""

    @abstractmethod
    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        """Return the account's order history."""

    @abstractmethod
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

        Raises:
            InvalidRequestError: If type, side or price are inconsistent.
            InsufficientFundsError: If the account cannot cover the order.
        """

    @abstractmethod
    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """
        Cancel a working order.

        Raises:
            InvalidOrderError: If the order is unknown or not owned by the account.
        """

    @abstractmethod
    async def sign_in(self) -> AccessToken:
        """Obtain an access token through the client-credentials grant."""

    @abstractmethod
    async def close(self) -> None:
        """
        Release network resources.

        Must be safe to call multiple times.
        """

    def __repr__(self) -> str:
        """Return string representation of adapter."""
        return f"{self.__class__.__name__}(venue={self.venue_id})"
