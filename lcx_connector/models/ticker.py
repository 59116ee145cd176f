"""
Ticker, trade and candle models.

Models:
    Ticker: 24h statistics for a market
    TradeSide: Enum for trade side (buy/sell)
    TradeRow: Fixed-position venue trade array
    Trade: Normalized public trade
    OHLCV: One candle as a fixed 6-tuple
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, Field, model_validator

from lcx_connector.exceptions import MalformedResponseError


class TradeSide(str, Enum):
    """
    Enumeration for trade side.

    Attributes:
        BUY: Buyer was the aggressor
        SELL: Seller was the aggressor
    """

    BUY = "buy"
    SELL = "sell"


class Ticker(BaseModel):
    """
    Ticker data for a market.

    Absent venue fields stay None. ``open`` and ``percentage`` are derived
    from ``close`` and ``change``; ``last`` always equals ``close``.

    Attributes:
        symbol: Unified market symbol.
        timestamp: Venue update time in milliseconds.
        datetime: ISO-8601 form of ``timestamp``.
        high: 24h high.
        low: 24h low.
        bid: Best bid.
        ask: Best ask.
        open: close - change.
        close: Last traded price.
        last: Same as ``close``.
        change: Absolute 24h change.
        percentage: change / open * 100, or 0 when open is 0.
        average: Not reported by the venue.
        base_volume: 24h volume in base currency.
        quote_volume: Copy of ``base_volume``; the venue sends a single volume.
        info: Raw venue payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: Optional[str] = None
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    high: Optional[Decimal] = None
    low: Optional[Decimal] = None
    bid: Optional[Decimal] = None
    ask: Optional[Decimal] = None
    open: Optional[Decimal] = None
    close: Optional[Decimal] = None
    last: Optional[Decimal] = None
    change: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    average: Optional[Decimal] = None
    base_volume: Optional[Decimal] = None
    quote_volume: Optional[Decimal] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_ticker(self) -> "Ticker":
        """
        Validate ticker data consistency.

        Ensures:
            - High >= Low when both are known
            - last mirrors close
        """
        if self.high is not None and self.low is not None and self.high < self.low:
            raise ValueError(f"24h high ({self.high}) must be >= 24h low ({self.low})")
        if self.last != self.close:
            raise ValueError(f"last ({self.last}) must equal close ({self.close})")
        return self


class TradeRow(NamedTuple):
    """
    Venue trade array ``[price, amount, side, timestamp]``.

    Fields are read by position exactly once, in ``from_payload``.
    """

    price: Any
    amount: Any
    side: Any
    timestamp: Any

    @classmethod
    def from_payload(cls, payload: Any) -> "TradeRow":
        """
        Decode a positional trade array.

        Args:
            payload: Raw array from the ``trade/recent`` response.

        Returns:
            TradeRow: The four positional fields.

        Raises:
            MalformedResponseError: If payload is not a list of at least four items.
        """
        if not isinstance(payload, (list, tuple)) or len(payload) < len(cls._fields):
            raise MalformedResponseError(
                f"Trade row must be [price, amount, side, timestamp], got {payload!r}"
            )
        return cls(*payload[: len(cls._fields)])


class Trade(BaseModel):
    """
    Normalized public trade.

    Attributes:
        id: Trade identifier (the venue reports none; the timestamp is used).
        timestamp: Execution time in milliseconds.
        datetime: ISO-8601 form of ``timestamp``.
        symbol: Unified market symbol, when known.
        side: Aggressor side.
        price: Execution price.
        amount: Executed amount in base currency.
        cost: price * amount.
        info: Raw venue array.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    timestamp: int = Field(..., ge=0)
    datetime: str
    symbol: Optional[str] = None
    side: TradeSide
    price: Decimal = Field(..., ge=Decimal("0"))
    amount: Decimal = Field(..., ge=Decimal("0"))
    cost: Decimal = Field(..., ge=Decimal("0"))
    info: List[Any] = Field(default_factory=list)

    @property
    def is_buy(self) -> bool:
        """Check if the buyer was the aggressor."""
        return self.side == TradeSide.BUY


class OHLCV(NamedTuple):
    """One candle: ``[timestamp, open, high, low, close, volume]``."""

    timestamp: int
    open: Optional[Decimal]
    high: Optional[Decimal]
    low: Optional[Decimal]
    close: Optional[Decimal]
    volume: Optional[Decimal]
