"""
Precision and timestamp helpers shared by the LCX normalizer and adapter.

Rounding is delegated to ``ccxt``'s decimal_to_precision and always
truncates toward zero, so a submitted amount can never exceed the amount
the caller asked for. Market precision values that are whole numbers count
decimal places; fractional values are tick sizes.
"""

from decimal import Decimal
from typing import Any, Optional

from ccxt.base.decimal_to_precision import (
    DECIMAL_PLACES,
    NO_PADDING,
    TICK_SIZE,
    TRUNCATE,
    decimal_to_precision,
)
from ccxt.base.exchange import Exchange

from lcx_connector.exceptions import InvalidRequestError
from lcx_connector.models.market import Market


def iso8601(timestamp: Optional[int]) -> Optional[str]:
    """
    Format epoch milliseconds as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Returns:
        Optional[str]: ISO-8601 string, or None for a missing or negative timestamp.
    """
    if timestamp is None:
        return None
    return Exchange.iso8601(int(timestamp))


def parse8601(value: Optional[str]) -> Optional[int]:
    """Parse an ISO-8601 string into epoch milliseconds (None if unparseable)."""
    if not value:
        return None
    return Exchange.parse8601(value)


def parse_timeframe(timeframe: str) -> int:
    """Return the length of a timeframe such as "15m" or "1w" in seconds."""
    return Exchange.parse_timeframe(timeframe)


def truncate(value: Any, precision: Optional[Decimal]) -> Decimal:
    """
    Truncate ``value`` to ``precision``.

    Args:
        value: Number to round toward zero.
        precision: Decimal places (whole number) or tick size (fraction).
            None leaves the value untouched.

    Returns:
        Decimal: The truncated value.
    """
    number = Decimal(str(value))
    if precision is None:
        return number

    if precision == precision.to_integral_value():
        rounded = decimal_to_precision(
            number,
            rounding_mode=TRUNCATE,
            precision=int(precision),
            counting_mode=DECIMAL_PLACES,
            padding_mode=NO_PADDING,
        )
    else:
        rounded = decimal_to_precision(
            number,
            rounding_mode=TRUNCATE,
            precision=precision,
            counting_mode=TICK_SIZE,
            padding_mode=NO_PADDING,
        )
    return Decimal(rounded)


def amount_to_precision(market: Market, amount: Any) -> Decimal:
    """
    Truncate an order amount to the market's amount precision.

    Raises:
        InvalidRequestError: If the truncated amount is zero.
    """
    result = truncate(amount, market.precision.amount)
    if result <= 0:
        raise InvalidRequestError(
            f"Amount {amount} is below the precision of {market.symbol}"
        )
    return result


def price_to_precision(market: Market, price: Any) -> Decimal:
    """Truncate a price to the market's price precision."""
    return truncate(price, market.precision.price)


def cost_to_precision(market: Market, cost: Any) -> Decimal:
    """Truncate an order cost (amount * price) to the market's cost precision."""
    return truncate(cost, market.precision.cost)
