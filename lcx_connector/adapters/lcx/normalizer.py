"""
LCX data normalizer.

Converts LCX-specific JSON payloads to the canonical Pydantic models. All
prices, amounts and fees become Decimal; fields the venue leaves out become
None rather than zero. A field the entity cannot exist without raises
MalformedResponseError.

LCX Market Format (GET market/pairs):
    {
        "symbol": "ETH/BTC",
        "base": "ETH",
        "quote": "BTC",
        "status": true,
        "amountPrecision": 4,
        "pricePrecision": 6,
        "minBaseOrder": 0.001, "maxBaseOrder": 1000,
        "minQuoteOrder": 0.0001, "maxQuoteOrder": 100,
        "taker_fee_rate": 0.2,
        "maker_fee_rate": 0.2
    }

LCX Ticker Format (POST market/ticker):
    {
        "symbol": "ETH/BTC",
        "lastPrice": 0.022902,
        "change": -0.000047,
        "high": 0.024093, "low": 0.021693,
        "bestBid": 0.0229, "bestAsk": 0.0231,
        "volume": 15681.986,
        "lastUpdated": 1605937174000
    }

LCX Trade Format (POST trade/recent):
    [price, amount, side, timestamp]
    [0.023, 0.1, "BUY", 1605937174]

LCX Order Book Format (POST order/book):
    {"buy": [[0.0289968, 1.33], ...], "sell": [[0.029, 1.1], ...]}

LCX Order Format (POST open / orderHistory / create / cancel):
    {
        "Id": "...", "Pair": "ETH/BTC", "OrderType": "LIMIT", "Side": "BUY",
        "Status": "OPEN", "Price": 0.023, "Amount": 2, "Filled": 0,
        "Average": 0, "Cost": 0, "UpdatedAt": 1605937174000,
        "cancelled_quantity": 0, "client_order_id": ""
    }

LCX Candle Format (POST market/kline):
    {
        "open": "0.02811", "close": "0.02811", "low": "0.02811", "high": "0.02811",
        "base_volume": "0.0005", "start_time": "2018-11-30T18:19:00.000Z"
    }

LCX Balance Format (GET balances):
    [{"coin": "ETH", "balance": {"totalBalance": 1, "freeBalance": 0.5, "occupiedBalance": 0.5}}]
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

import structlog

from lcx_connector.adapters.lcx.precision import iso8601, parse8601, parse_timeframe
from lcx_connector.config.models import TradingFees
from lcx_connector.exceptions import InvalidRequestError, MalformedResponseError
from lcx_connector.models.account import (
    Balance,
    BalanceEntry,
    Transaction,
    TransactionFee,
)
from lcx_connector.models.market import (
    Currency,
    CurrencyLimits,
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
)
from lcx_connector.models.order import Order
from lcx_connector.models.orderbook import OrderBook, PriceLevel
from lcx_connector.models.ticker import OHLCV, Ticker, Trade, TradeRow, TradeSide

logger = structlog.get_logger(__name__)

# Unified timeframe -> LCX resolution
TIMEFRAMES: Dict[str, str] = {
    "1m": "1m",
    "3m": "3m",
    "5m": "5m",
    "10m": "10m",
    "15m": "15m",
    "30m": "30m",
    "1h": "1h",
    "4h": "4h",
    "6h": "6h",
    "12h": "12h",
    "1d": "1D",
    "1w": "1W",
    "1M": "1M",
}

ORDER_STATUSES: Dict[str, str] = {
    "open": "open",
    "cancelled": "canceled",
    "filled": "closed",
}

TRANSACTION_STATUSES: Dict[str, str] = {
    "requested": "pending",
    "pending": "pending",
    "confirming": "pending",
    "confirmed": "pending",
    "applying": "pending",
    "done": "ok",
    "cancelled": "canceled",
    "cancelling": "canceled",
}

TRADE_SIDES: Dict[str, TradeSide] = {
    "BUY": TradeSide.BUY,
    "SELL": TradeSide.SELL,
}

# 1970-01-04T00:00:00Z, the first Sunday after the epoch
FIRST_SUNDAY_SECONDS = 259200

# Trade timestamps below this are seconds, not milliseconds
SECONDS_TIMESTAMP_CEILING = 10**11


# =============================================================================
# FIELD ACCESSORS
# =============================================================================


def require(payload: Any, key: str) -> Any:
    """
    Return a field the entity cannot be built without.

    Raises:
        MalformedResponseError: If payload is not a mapping or the field is
            absent, None or an empty string.
    """
    if not isinstance(payload, Mapping):
        raise MalformedResponseError(f"Expected an object with {key!r}, got {type(payload).__name__}")
    value = payload.get(key)
    if value is None or value == "":
        raise MalformedResponseError(f"Missing required field {key!r}")
    return value


def safe_value(payload: Any, key: str) -> Any:
    """Return a field, or None when payload is not a mapping or lacks it."""
    if not isinstance(payload, Mapping):
        return None
    return payload.get(key)


def safe_string(payload: Any, key: str) -> Optional[str]:
    """Return a field as a string, or None when absent."""
    value = safe_value(payload, key)
    if value is None:
        return None
    return str(value)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a venue number (string, int or float) to Decimal.

    Returns:
        Optional[Decimal]: None for None or an empty string.

    Raises:
        MalformedResponseError: If the value is not numeric.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value))
    except InvalidOperation as e:
        raise MalformedResponseError(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise MalformedResponseError(f"Not a finite number: {value!r}")
    return result


def safe_decimal(payload: Any, key: str) -> Optional[Decimal]:
    """Return a numeric field as Decimal, or None when absent."""
    return to_decimal(safe_value(payload, key))


def safe_integer(payload: Any, key: str) -> Optional[int]:
    """Return a numeric field truncated to int, or None when absent."""
    value = safe_decimal(payload, key)
    return int(value) if value is not None else None


def safe_bool(payload: Any, key: str) -> Optional[bool]:
    """Return a boolean field, or None when absent or not a boolean."""
    value = safe_value(payload, key)
    return value if isinstance(value, bool) else None


def _priority_key(entry: Any) -> tuple:
    """Sort key placing entries without a priority last."""
    priority = safe_decimal(entry, "priority")
    return (priority is None, priority if priority is not None else Decimal("0"))


def _timestamp_ms(value: Any) -> Optional[int]:
    """Interpret a venue timestamp given as epoch milliseconds or ISO-8601."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return int(Decimal(value))
        except InvalidOperation:
            parsed = parse8601(value)
            if parsed is None:
                raise MalformedResponseError(f"Unparseable timestamp: {value!r}")
            return parsed
    number = to_decimal(value)
    return int(number) if number is not None else None


def _active_flag(value: Any) -> bool:
    """Interpret the market ``status`` field."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("active", "true", "1", "open", "enabled")
    if isinstance(value, (int, float)):
        return value != 0
    return False


class LCXNormalizer:
    """
    Normalizes LCX payloads to canonical models.

    Instances carry the venue's common-currency table and default fees;
    everything else is pure.

    Example:
        >>> normalizer = LCXNormalizer()
        >>> market = normalizer.normalize_market(raw_pair)
        >>> market.symbol
        'ETH/BTC'
    """

    def __init__(
        self,
        common_currencies: Optional[Dict[str, str]] = None,
        default_fees: Optional[TradingFees] = None,
    ):
        """
        Initialize normalizer.

        Args:
            common_currencies: Venue currency id -> unified code overrides.
            default_fees: Fees applied when a market omits its own rates.
        """
        self.common_currencies = dict(common_currencies or {})
        self.default_fees = default_fees or TradingFees()

    # =========================================================================
    # REFERENCE DATA
    # =========================================================================

    def safe_currency_code(self, currency_id: Optional[str]) -> Optional[str]:
        """
        Map a venue currency id to a unified code.

        Example:
            >>> LCXNormalizer({"CBC": "CryptoBharatCoin"}).safe_currency_code("cbc")
            'CryptoBharatCoin'
        """
        if currency_id is None:
            return None
        code = currency_id.upper()
        return self.common_currencies.get(code, code)

    def normalize_market(self, pair: Dict[str, Any]) -> Market:
        """
        Normalize one entry of ``market/pairs``.

        Fee rates arrive as percentages and are stored as fractions. Cost
        precision reuses ``amountPrecision``; the venue reports no separate
        cost precision.

        Raises:
            MalformedResponseError: If symbol, base or quote is missing, or a
                value is out of range.
        """
        try:
            market_id = str(require(pair, "symbol"))
            base_id = str(require(pair, "base"))
            quote_id = str(require(pair, "quote"))
            base = self.safe_currency_code(base_id)
            quote = self.safe_currency_code(quote_id)

            amount_precision = safe_integer(pair, "amountPrecision")
            amount_precision_dec = (
                Decimal(amount_precision) if amount_precision is not None else None
            )
            precision = MarketPrecision(
                amount=amount_precision_dec,
                price=safe_decimal(pair, "pricePrecision"),
                cost=amount_precision_dec,
            )

            taker_rate = safe_decimal(pair, "taker_fee_rate")
            maker_rate = safe_decimal(pair, "maker_fee_rate")

            market = Market(
                id=market_id,
                symbol=f"{base}/{quote}",
                base=base,
                quote=quote,
                base_id=base_id,
                quote_id=quote_id,
                active=_active_flag(pair.get("status", False)),
                precision=precision,
                taker=taker_rate / 100 if taker_rate is not None else self.default_fees.taker,
                maker=maker_rate / 100 if maker_rate is not None else self.default_fees.maker,
                limits=MarketLimits(
                    amount=MinMax(
                        min=safe_decimal(pair, "minBaseOrder"),
                        max=safe_decimal(pair, "maxBaseOrder"),
                    ),
                    price=MinMax(
                        min=safe_decimal(pair, "min_price"),
                        max=safe_decimal(pair, "max_price"),
                    ),
                    cost=MinMax(
                        min=safe_decimal(pair, "minQuoteOrder"),
                        max=safe_decimal(pair, "maxQuoteOrder"),
                    ),
                ),
                info=pair,
            )
        except (ValueError, TypeError) as e:
            logger.error(
                "market_normalization_failed",
                exchange="lcx",
                error=str(e),
                payload=pair,
            )
            raise MalformedResponseError(f"Invalid data in LCX market: {e}") from e

        return market

    def normalize_currency(self, currency: Dict[str, Any]) -> Currency:
        """
        Normalize one entry of ``currency``.

        When a currency is available on several platforms the one with the
        lowest ``priority`` describes it; the same rule picks the withdrawal
        fee. A currency is inactive only when both deposits and withdrawals
        are suspended on that platform.
        """
        try:
            currency_id = str(require(currency, "id"))
            code = self.safe_currency_code(currency_id)

            display_name = safe_value(currency, "display_name")
            if isinstance(display_name, Mapping):
                name = safe_string(display_name, "en-us")
            else:
                name = str(display_name) if display_name is not None else None

            platforms = safe_value(currency, "platform") or []
            platform = sorted(platforms, key=_priority_key)[0] if platforms else {}

            precision = safe_integer(platform, "precision")
            deposit_suspended = safe_bool(platform, "deposit_suspended") or False
            withdrawal_suspended = safe_bool(platform, "withdrawal_suspended") or False

            withdrawal_fees = safe_value(platform, "withdrawal_fee") or []
            withdrawal_fee = (
                sorted(withdrawal_fees, key=_priority_key)[0] if withdrawal_fees else {}
            )

            step = Decimal(10) ** -precision if precision is not None else None
            ceiling = Decimal(10) ** precision if precision is not None else None

            result = Currency(
                id=currency_id,
                code=code,
                name=name,
                active=not (deposit_suspended and withdrawal_suspended),
                fee=safe_decimal(withdrawal_fee, "amount"),
                precision=precision,
                limits=CurrencyLimits(
                    amount=MinMax(min=step, max=ceiling),
                    price=MinMax(min=step, max=ceiling),
                    deposit=MinMax(min=safe_decimal(platform, "min_deposit_amount")),
                    withdraw=MinMax(min=safe_decimal(platform, "min_withdrawal_amount")),
                ),
                info=currency,
            )
        except (ValueError, TypeError) as e:
            logger.error(
                "currency_normalization_failed",
                exchange="lcx",
                error=str(e),
            )
            raise MalformedResponseError(f"Invalid data in LCX currency: {e}") from e

        return result

    # =========================================================================
    # MARKET DATA
    # =========================================================================

    @staticmethod
    def normalize_ticker(ticker: Dict[str, Any]) -> Ticker:
        """
        Normalize a ticker.

        ``open`` is derived as close - change and ``percentage`` as
        change / open * 100 (0 when open is 0). ``quote_volume`` repeats
        ``base_volume`` because the venue reports a single volume figure.

        Raises:
            MalformedResponseError: If the symbol is missing or values are invalid.
        """
        try:
            symbol = str(require(ticker, "symbol"))
            timestamp = _timestamp_ms(safe_value(ticker, "lastUpdated"))
            close = safe_decimal(ticker, "lastPrice")
            change = safe_decimal(ticker, "change")

            open_price: Optional[Decimal] = None
            percentage: Optional[Decimal] = None
            if change is not None and close is not None:
                open_price = close - change
                percentage = (change / open_price) * 100 if open_price != 0 else Decimal("0")

            base_volume = safe_decimal(ticker, "volume")

            result = Ticker(
                symbol=symbol,
                timestamp=timestamp,
                datetime=iso8601(timestamp),
                high=safe_decimal(ticker, "high"),
                low=safe_decimal(ticker, "low"),
                bid=safe_decimal(ticker, "bestBid"),
                ask=safe_decimal(ticker, "bestAsk"),
                open=open_price,
                close=close,
                last=close,
                change=change,
                percentage=percentage,
                average=None,
                base_volume=base_volume,
                quote_volume=base_volume,
                info=ticker,
            )
        except (ValueError, TypeError) as e:
            logger.error(
                "ticker_normalization_failed_invalid_data",
                exchange="lcx",
                error=str(e),
            )
            raise MalformedResponseError(f"Invalid data in LCX ticker: {e}") from e

        logger.debug(
            "normalized_ticker",
            exchange="lcx",
            symbol=symbol,
            close=str(close) if close is not None else None,
        )
        return result

    @staticmethod
    def normalize_trade(payload: Any, symbol: Optional[str] = None) -> Trade:
        """
        Normalize one positional trade array.

        Args:
            payload: ``[price, amount, side, timestamp]``.
            symbol: Unified symbol the trades were requested for.

        Raises:
            MalformedResponseError: If the array is too short, a field is
                missing, or the side is not "BUY"/"SELL".
        """
        row = TradeRow.from_payload(payload)

        side = TRADE_SIDES.get(row.side) if isinstance(row.side, str) else None
        if side is None:
            logger.error(
                "trade_normalization_failed_unknown_side",
                exchange="lcx",
                symbol=symbol,
                side=row.side,
            )
            raise MalformedResponseError(f"Unrecognized trade side: {row.side!r}")

        price = to_decimal(row.price)
        amount = to_decimal(row.amount)
        raw_timestamp = _timestamp_ms(row.timestamp)
        if price is None or amount is None or raw_timestamp is None:
            raise MalformedResponseError(f"Incomplete trade row: {payload!r}")

        timestamp = (
            raw_timestamp * 1000
            if raw_timestamp < SECONDS_TIMESTAMP_CEILING
            else raw_timestamp
        )

        try:
            return Trade(
                id=str(raw_timestamp),
                timestamp=timestamp,
                datetime=iso8601(timestamp),
                symbol=symbol,
                side=side,
                price=price,
                amount=amount,
                cost=price * amount,
                info=list(payload),
            )
        except (ValueError, TypeError) as e:
            raise MalformedResponseError(f"Invalid data in LCX trade: {e}") from e

    @staticmethod
    def normalize_order_book(
        payload: Dict[str, Any],
        symbol: str,
        limit: Optional[int] = None,
    ) -> OrderBook:
        """
        Normalize an ``order/book`` payload.

        Levels with a zero or missing amount are dropped, bids are sorted
        highest first and asks lowest first, and each side is cut to
        ``limit`` levels.

        Raises:
            MalformedResponseError: If a level is not a [price, amount] pair.
        """

        def parse_levels(raw_levels: Any) -> List[PriceLevel]:
            levels: List[PriceLevel] = []
            for level in raw_levels or []:
                if not isinstance(level, (list, tuple)) or len(level) < 2:
                    raise MalformedResponseError(f"Order book level must be [price, amount], got {level!r}")
                price = to_decimal(level[0])
                amount = to_decimal(level[1])
                # Skip empty levels
                if price is None or not amount:
                    continue
                levels.append(PriceLevel(price=price, amount=amount))
            return levels

        try:
            bids = parse_levels(safe_value(payload, "buy"))
            asks = parse_levels(safe_value(payload, "sell"))

            bids.sort(key=lambda x: x.price, reverse=True)
            asks.sort(key=lambda x: x.price)

            if limit is not None:
                bids = bids[:limit]
                asks = asks[:limit]

            book = OrderBook(symbol=symbol, bids=bids, asks=asks)
        except (ValueError, TypeError) as e:
            logger.error(
                "orderbook_normalization_failed_invalid_data",
                exchange="lcx",
                symbol=symbol,
                error=str(e),
            )
            raise MalformedResponseError(f"Invalid data in LCX order book: {e}") from e

        logger.debug(
            "normalized_orderbook",
            exchange="lcx",
            symbol=symbol,
            bids_count=len(book.bids),
            asks_count=len(book.asks),
        )
        return book

    @staticmethod
    def normalize_ohlcv(candle: Dict[str, Any]) -> OHLCV:
        """
        Normalize one ``market/kline`` candle.

        Raises:
            MalformedResponseError: If ``start_time`` is missing or unparseable.
        """
        start_time = str(require(candle, "start_time"))
        timestamp = parse8601(start_time)
        if timestamp is None:
            raise MalformedResponseError(f"Unparseable candle start_time: {start_time!r}")
        return OHLCV(
            timestamp=timestamp,
            open=safe_decimal(candle, "open"),
            high=safe_decimal(candle, "high"),
            low=safe_decimal(candle, "low"),
            close=safe_decimal(candle, "close"),
            volume=safe_decimal(candle, "base_volume"),
        )

    @staticmethod
    def normalize_ohlcv_timestamp(timestamp: int, timeframe: str, after: bool = False) -> str:
        """
        Align a timestamp to the start of its candle.

        Sub-week timeframes floor to a multiple of their duration, ``1w``
        floors to the previous Sunday and ``1M`` to the first day of the
        calendar month. ``after`` returns the following bucket edge instead.

        Args:
            timestamp: Epoch milliseconds.
            timeframe: Unified timeframe (e.g., "1h", "1w", "1M").
            after: Return the next boundary rather than the current one.

        Returns:
            str: ISO-8601 boundary, e.g. "1970-01-04T00:00:00.000Z".

        Raises:
            InvalidRequestError: If the timeframe is not supported or the
                boundary falls before the epoch.

        Example:
            >>> LCXNormalizer.normalize_ohlcv_timestamp(259200000, "1w")
            '1970-01-04T00:00:00.000Z'
        """
        if timeframe not in TIMEFRAMES:
            raise InvalidRequestError(f"Unsupported timeframe: {timeframe}")

        duration = parse_timeframe(timeframe)

        if timeframe == "1M":
            iso = iso8601(timestamp)
            if iso is None:
                raise InvalidRequestError(f"Timestamp {timestamp} is before the epoch")
            year = int(iso[0:4])
            month = int(iso[5:7])
            if after:
                month += 1
                if month > 12:
                    month = 1
                    year += 1
            return f"{year:04d}-{month:02d}-01T00:00:00.000Z"

        seconds = int(timestamp) // 1000
        if timeframe == "1w":
            num_weeks = (seconds - FIRST_SUNDAY_SECONDS) // duration
            boundary = FIRST_SUNDAY_SECONDS + num_weeks * duration
        else:
            boundary = duration * (seconds // duration)

        if after:
            boundary += duration
        if boundary < 0:
            raise InvalidRequestError(
                f"Timestamp {timestamp} has no {timeframe} boundary after the epoch"
            )
        return iso8601(boundary * 1000)

    # =========================================================================
    # ACCOUNT AND TRADING
    # =========================================================================

    @staticmethod
    def parse_order_status(status: Optional[str]) -> Optional[str]:
        """
        Map a venue order status to a unified one.

        The status is lower-cased first. Unknown statuses pass through.

        Example:
            >>> LCXNormalizer.parse_order_status("filled")
            'closed'
            >>> LCXNormalizer.parse_order_status("FILLED")
            'closed'
            >>> LCXNormalizer.parse_order_status("unknown_status")
            'unknown_status'
        """
        if status is None:
            return None
        status = status.lower()
        return ORDER_STATUSES.get(status, status)

    @staticmethod
    def normalize_order(order: Dict[str, Any]) -> Order:
        """
        Normalize an order payload.

        ``remaining`` is the reported open amount plus any canceled
        quantity, so the canceled residue is not lost.

        Raises:
            MalformedResponseError: If Id, Side, OrderType or Status is missing.
        """
        try:
            order_id = str(require(order, "Id"))
            side = str(require(order, "Side")).lower()
            order_type = str(require(order, "OrderType")).lower()
            status = LCXNormalizer.parse_order_status(str(require(order, "Status")))

            timestamp = _timestamp_ms(safe_value(order, "UpdatedAt"))
            price = safe_decimal(order, "Price")
            amount = safe_decimal(order, "Amount")
            remaining = amount
            canceled_amount = safe_decimal(order, "cancelled_quantity")
            if canceled_amount is not None:
                remaining = canceled_amount if remaining is None else remaining + canceled_amount

            if order_type == "market":
                price = None

            client_order_id = safe_string(order, "client_order_id")
            if client_order_id == "":
                client_order_id = None

            result = Order(
                id=order_id,
                client_order_id=client_order_id,
                timestamp=timestamp,
                datetime=iso8601(timestamp),
                symbol=safe_string(order, "Pair"),
                type=order_type,
                side=side,
                status=status,
                price=price,
                amount=amount,
                filled=safe_decimal(order, "Filled"),
                remaining=remaining,
                average=safe_decimal(order, "Average"),
                cost=safe_decimal(order, "Cost"),
                info=order,
            )
        except (ValueError, TypeError) as e:
            logger.error(
                "order_normalization_failed_invalid_data",
                exchange="lcx",
                error=str(e),
            )
            raise MalformedResponseError(f"Invalid data in LCX order: {e}") from e

        return result

    @staticmethod
    def parse_transaction_status(status: Optional[str]) -> Optional[str]:
        """Map a venue transaction status to pending/ok/canceled (unknown values pass through)."""
        if status is None:
            return None
        return TRANSACTION_STATUSES.get(status, status)

    def normalize_transaction(self, transaction: Dict[str, Any]) -> Transaction:
        """
        Normalize a deposit or withdrawal.

        The fee is attached only when the venue reports a non-zero amount.
        """
        try:
            code = self.safe_currency_code(safe_string(transaction, "currency_id"))
            timestamp = parse8601(safe_string(transaction, "time"))

            fee: Optional[TransactionFee] = None
            fee_cost = safe_decimal(transaction, "fee")
            if fee_cost is not None and fee_cost != 0:
                fee = TransactionFee(currency=code, cost=fee_cost)

            return Transaction(
                id=safe_string(transaction, "id"),
                currency=code,
                amount=safe_decimal(transaction, "amount"),
                address=safe_string(transaction, "address"),
                tag=safe_string(transaction, "destination_tag"),
                status=self.parse_transaction_status(safe_string(transaction, "status")),
                type=safe_string(transaction, "type"),
                txid=safe_string(transaction, "hash"),
                timestamp=timestamp,
                datetime=iso8601(timestamp),
                fee=fee,
                info=transaction,
            )
        except (ValueError, TypeError) as e:
            logger.error(
                "transaction_normalization_failed_invalid_data",
                exchange="lcx",
                error=str(e),
            )
            raise MalformedResponseError(f"Invalid data in LCX transaction: {e}") from e

    def normalize_balance(self, rows: List[Dict[str, Any]]) -> Balance:
        """
        Normalize the ``balances`` payload.

        Missing figures are completed from the other two: total = free +
        used, free = total - used, used = total - free.

        Raises:
            MalformedResponseError: If a row has no ``coin``.
        """
        if not isinstance(rows, list):
            raise MalformedResponseError(f"Balances must be a list, got {type(rows).__name__}")

        balances: Dict[str, BalanceEntry] = {}
        for row in rows:
            code = self.safe_currency_code(str(require(row, "coin")))
            figures = safe_value(row, "balance") or {}
            total = safe_decimal(figures, "totalBalance")
            free = safe_decimal(figures, "freeBalance")
            used = safe_decimal(figures, "occupiedBalance")

            if total is None and free is not None and used is not None:
                total = free + used
            elif free is None and total is not None and used is not None:
                free = total - used
            elif used is None and total is not None and free is not None:
                used = total - free

            balances[code] = BalanceEntry(free=free, used=used, total=total)

        return Balance(balances=balances, info=rows)
