"""
Order book data models.

Models:
    PriceLevel: Single price level (price, amount)
    OrderBook: Normalized order book for one market
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


class PriceLevel(BaseModel):
    """
    Single price level in an order book.

    Attributes:
        price: Price at this level in quote currency.
        amount: Amount available at this level in base currency.

    Example:
        >>> level = PriceLevel(price=Decimal("0.029"), amount=Decimal("1.1"))
        >>> level.cost
        Decimal('0.0319')
    """

    model_config = {"frozen": True, "extra": "ignore"}

    price: Decimal = Field(
        ...,
        description="Price at this level in quote currency",
        ge=Decimal("0"),
    )
    amount: Decimal = Field(
        ...,
        description="Amount available at this level in base currency",
        ge=Decimal("0"),
    )

    @computed_field  # type: ignore[misc]
    @property
    def cost(self) -> Decimal:
        """Quote-currency value of this level (price * amount)."""
        return self.price * self.amount


class OrderBook(BaseModel):
    """
    Normalized order book.

    The venue reports neither a book timestamp nor a sequence number, so
    ``timestamp``, ``datetime`` and ``nonce`` are normally None.

    Attributes:
        symbol: Unified market symbol (e.g., "ETH/BTC").
        bids: Bid levels, sorted best (highest price) to worst.
        asks: Ask levels, sorted best (lowest price) to worst.
        timestamp: Book timestamp in milliseconds, if known.
        datetime: ISO-8601 form of ``timestamp``.
        nonce: Venue sequence number, if known.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    symbol: str = Field(
        ...,
        description="Unified market symbol",
        min_length=1,
    )
    bids: List[PriceLevel] = Field(
        default_factory=list,
        description="Bid levels, sorted best (highest) to worst",
    )
    asks: List[PriceLevel] = Field(
        default_factory=list,
        description="Ask levels, sorted best (lowest) to worst",
    )
    timestamp: Optional[int] = Field(
        default=None,
        description="Book timestamp in milliseconds",
    )
    datetime: Optional[str] = Field(
        default=None,
        description="ISO-8601 book timestamp",
    )
    nonce: Optional[int] = Field(
        default=None,
        description="Venue sequence number",
    )

    @model_validator(mode="after")
    def validate_order_book(self) -> "OrderBook":
        """
        Validate order book ordering.

        Ensures:
            - Bids are sorted in descending order (best first)
            - Asks are sorted in ascending order (best first)
        """
        for i in range(len(self.bids) - 1):
            if self.bids[i].price < self.bids[i + 1].price:
                raise ValueError(
                    f"Bids must be sorted descending: {self.bids[i].price} < {self.bids[i + 1].price}"
                )

        for i in range(len(self.asks) - 1):
            if self.asks[i].price > self.asks[i + 1].price:
                raise ValueError(
                    f"Asks must be sorted ascending: {self.asks[i].price} > {self.asks[i + 1].price}"
                )

        return self

    @property
    def best_bid(self) -> Optional[Decimal]:
        """Best (highest) bid price, or None if there are no bids."""
        return self.bids[0].price if self.bids else None

    @property
    def best_ask(self) -> Optional[Decimal]:
        """Best (lowest) ask price, or None if there are no asks."""
        return self.asks[0].price if self.asks else None

    @property
    def spread(self) -> Optional[Decimal]:
        """
        Calculate the absolute spread (best_ask - best_bid).

        Returns:
            Optional[Decimal]: Absolute spread, or None if either side is empty.
        """
        if self.best_bid is not None and self.best_ask is not None:
            return self.best_ask - self.best_bid
        return None
