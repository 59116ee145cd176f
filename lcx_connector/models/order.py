"""
Order model.

Orders are created by ``create`` and then move through ``open`` to
``closed`` or ``canceled`` on the venue. The connector never mutates an
Order; state transitions are observed by fetching and normalizing again.
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class Order(BaseModel):
    """
    Normalized order.

    ``status`` is one of ``open``, ``canceled`` or ``closed`` for every
    status the venue documents; undocumented statuses pass through verbatim.

    Attributes:
        id: Venue order id.
        client_order_id: Caller supplied id, None when blank.
        timestamp: Last update time in milliseconds.
        datetime: ISO-8601 form of ``timestamp``.
        symbol: Market symbol as reported by the venue.
        type: "limit" or "market".
        side: "buy" or "sell".
        status: Unified status.
        price: Limit price; always None for market orders.
        amount: Order amount as reported by the venue.
        filled: Executed amount.
        remaining: Open amount plus any canceled residue.
        average: Average fill price.
        cost: Executed cost in quote currency.
        info: Raw venue payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(..., min_length=1)
    client_order_id: Optional[str] = None
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    symbol: Optional[str] = None
    type: str = Field(..., min_length=1)
    side: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    price: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    filled: Optional[Decimal] = None
    remaining: Optional[Decimal] = None
    average: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    info: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_order(self) -> "Order":
        """Market orders never carry a limit price."""
        if self.type == "market" and self.price is not None:
            raise ValueError("Market orders must not carry a price")
        return self

    @property
    def is_open(self) -> bool:
        """Check if the order is still working on the venue."""
        return self.status == "open"
