"""
Market and currency reference models.

Markets are built once per catalog refresh and cached for an hour; both
models are immutable after construction.

Models:
    MinMax: Optional lower/upper bound pair
    MarketPrecision: Amount, price and cost precision of a market
    MarketLimits: Amount, price and cost bounds of a market
    Market: One tradable pair
    CurrencyLimits: Trading, deposit and withdrawal bounds of a currency
    Currency: One listed currency
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class MinMax(BaseModel):
    """Lower and upper bound; either side may be unknown."""

    model_config = {"frozen": True, "extra": "forbid"}

    min: Optional[Decimal] = Field(default=None, description="Lower bound")
    max: Optional[Decimal] = Field(default=None, description="Upper bound")


class MarketPrecision(BaseModel):
    """
    Precision of a market.

    Integral values count decimal places; fractional values are tick sizes.

    Attributes:
        amount: Precision of order amounts.
        price: Precision of prices.
        cost: Precision of order cost (amount * price).
    """

    model_config = {"frozen": True, "extra": "forbid"}

    amount: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    price: Optional[Decimal] = Field(default=None, ge=Decimal("0"))
    cost: Optional[Decimal] = Field(default=None, ge=Decimal("0"))


class MarketLimits(BaseModel):
    """Amount, price and cost bounds of a market."""

    model_config = {"frozen": True, "extra": "forbid"}

    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)


class Market(BaseModel):
    """
    One tradable pair.

    Attributes:
        id: Venue symbol (e.g., "ETH/BTC").
        symbol: Unified symbol, always ``base + "/" + quote``.
        base: Unified base currency code.
        quote: Unified quote currency code.
        base_id: Venue base currency id.
        quote_id: Venue quote currency id.
        active: Whether the market is open for trading.
        precision: Amount, price and cost precision.
        taker: Taker fee as a fraction (0.002 == 0.2%).
        maker: Maker fee as a fraction.
        limits: Amount, price and cost bounds.
        info: Raw venue payload.

    Example:
        >>> market = Market(
        ...     id="ETH/BTC",
        ...     symbol="ETH/BTC",
        ...     base="ETH",
        ...     quote="BTC",
        ...     base_id="ETH",
        ...     quote_id="BTC",
        ...     active=True,
        ...     taker=Decimal("0.002"),
        ...     maker=Decimal("0.002"),
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., description="Venue symbol", min_length=1)
    symbol: str = Field(..., description="Unified BASE/QUOTE symbol", min_length=3)
    base: str = Field(..., description="Unified base currency", min_length=1)
    quote: str = Field(..., description="Unified quote currency", min_length=1)
    base_id: str = Field(..., description="Venue base currency id", min_length=1)
    quote_id: str = Field(..., description="Venue quote currency id", min_length=1)
    active: bool = Field(default=False, description="Open for trading")
    precision: MarketPrecision = Field(default_factory=MarketPrecision)
    taker: Optional[Decimal] = Field(
        default=None,
        description="Taker fee rate as a fraction",
        ge=Decimal("0"),
    )
    maker: Optional[Decimal] = Field(
        default=None,
        description="Maker fee rate as a fraction",
        ge=Decimal("0"),
    )
    limits: MarketLimits = Field(default_factory=MarketLimits)
    info: Dict[str, Any] = Field(default_factory=dict, description="Raw venue payload")

    @model_validator(mode="after")
    def validate_symbol(self) -> "Market":
        """Ensure the unified symbol is derived from base and quote."""
        expected = f"{self.base}/{self.quote}"
        if self.symbol != expected:
            raise ValueError(f"Market symbol {self.symbol!r} does not match {expected!r}")
        return self


class CurrencyLimits(BaseModel):
    """Trading, deposit and withdrawal bounds of a currency."""

    model_config = {"frozen": True, "extra": "forbid"}

    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)
    deposit: MinMax = Field(default_factory=MinMax)
    withdraw: MinMax = Field(default_factory=MinMax)


class Currency(BaseModel):
    """
    One listed currency, described by its canonical (lowest priority) platform.

    Attributes:
        id: Venue currency id.
        code: Unified currency code.
        name: English display name.
        active: False only when both deposits and withdrawals are suspended.
        fee: Withdrawal fee of the canonical fee entry.
        precision: Decimal places on the canonical platform.
        limits: Trading, deposit and withdrawal bounds.
        info: Raw venue payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    name: Optional[str] = None
    active: bool = True
    fee: Optional[Decimal] = None
    precision: Optional[int] = Field(default=None, ge=0)
    limits: CurrencyLimits = Field(default_factory=CurrencyLimits)
    info: Dict[str, Any] = Field(default_factory=dict)
