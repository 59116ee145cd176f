"""
Canonical Pydantic data models.

Every model is frozen once constructed. Prices, amounts and fees use
Decimal; venue fields that are absent stay None rather than zero.

Modules:
    market: Markets and currencies
    ticker: Tickers, trades and candles
    orderbook: Order books and price levels
    order: Orders
    account: Balances, transactions and access tokens

Example:
    >>> from lcx_connector.models import Market, Ticker, Order
"""

# Reference data
from lcx_connector.models.market import (
    Currency,
    CurrencyLimits,
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
)

# Market data
from lcx_connector.models.orderbook import (
    OrderBook,
    PriceLevel,
)
from lcx_connector.models.ticker import (
    OHLCV,
    Ticker,
    Trade,
    TradeRow,
    TradeSide,
)

# Trading
from lcx_connector.models.order import Order

# Account
from lcx_connector.models.account import (
    AccessToken,
    Balance,
    BalanceEntry,
    Transaction,
    TransactionFee,
)

__all__ = [
    # Reference data
    "MinMax",
    "MarketPrecision",
    "MarketLimits",
    "Market",
    "CurrencyLimits",
    "Currency",
    # Market data
    "PriceLevel",
    "OrderBook",
    "Ticker",
    "TradeSide",
    "TradeRow",
    "Trade",
    "OHLCV",
    # Trading
    "Order",
    # Account
    "BalanceEntry",
    "Balance",
    "TransactionFee",
    "Transaction",
    "AccessToken",
]
