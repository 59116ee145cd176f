"""Tests for LCXNormalizer and the field accessors."""

from decimal import Decimal

import pytest

from conftest import MARKET_PAIRS, ORDER_PAYLOAD
from lcx_connector.adapters.lcx.normalizer import (
    LCXNormalizer,
    require,
    safe_bool,
    safe_decimal,
    safe_integer,
    safe_string,
)
from lcx_connector.config.models import ExchangeConfig, TradingFees
from lcx_connector.exceptions import InvalidRequestError, MalformedResponseError
from lcx_connector.models.ticker import TradeSide


@pytest.fixture
def normalizer() -> LCXNormalizer:
    exchange = ExchangeConfig()
    return LCXNormalizer(exchange.common_currencies, exchange.fees)


class TestAccessors:
    def test_absent_fields_are_none(self):
        payload = {"a": None, "b": ""}
        assert safe_string(payload, "missing") is None
        assert safe_decimal(payload, "a") is None
        assert safe_decimal(payload, "b") is None
        assert safe_integer(payload, "missing") is None
        assert safe_bool(payload, "missing") is None

    def test_numbers_become_decimal(self):
        payload = {"float": 0.1, "str": "12.50", "int": 3}
        assert safe_decimal(payload, "float") == Decimal("0.1")
        assert safe_decimal(payload, "str") == Decimal("12.50")
        assert safe_integer(payload, "str") == 12
        assert safe_string(payload, "int") == "3"

    def test_non_numeric_value_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            safe_decimal({"price": "abc"}, "price")

    def test_require_raises_on_missing(self):
        with pytest.raises(MalformedResponseError):
            require({"symbol": ""}, "symbol")
        with pytest.raises(MalformedResponseError):
            require(["not", "a", "dict"], "symbol")
        assert require({"symbol": "ETH/BTC"}, "symbol") == "ETH/BTC"


class TestNormalizeMarket:
    def test_market_fields(self, normalizer):
        market = normalizer.normalize_market(MARKET_PAIRS[0])

        assert market.id == "ETH/BTC"
        assert market.symbol == "ETH/BTC"
        assert market.base == "ETH"
        assert market.quote == "BTC"
        assert market.active is True
        assert market.precision.amount == Decimal("4")
        assert market.precision.price == Decimal("6")
        assert market.precision.cost == market.precision.amount
        assert market.taker == Decimal("0.003")
        assert market.maker == Decimal("0.001")
        assert market.limits.amount.min == Decimal("0.001")
        assert market.limits.cost.max == Decimal("100")
        assert market.limits.price.min is None
        assert market.info == MARKET_PAIRS[0]

    def test_missing_fee_rates_use_defaults(self):
        normalizer = LCXNormalizer(default_fees=TradingFees(maker=Decimal("0.001"), taker=Decimal("0.0025")))
        market = normalizer.normalize_market(MARKET_PAIRS[1])
        assert market.maker == Decimal("0.001")
        assert market.taker == Decimal("0.0025")

    def test_common_currency_mapping(self, normalizer):
        market = normalizer.normalize_market(MARKET_PAIRS[2])
        assert market.id == "CBC/EUR"
        assert market.base == "CryptoBharatCoin"
        assert market.base_id == "CBC"
        assert market.symbol == "CryptoBharatCoin/EUR"
        assert market.active is False

    @pytest.mark.parametrize("field", ["symbol", "base", "quote"])
    def test_missing_required_field(self, normalizer, field):
        pair = {k: v for k, v in MARKET_PAIRS[0].items() if k != field}
        with pytest.raises(MalformedResponseError):
            normalizer.normalize_market(pair)

    def test_negative_precision_is_rejected(self, normalizer):
        pair = dict(MARKET_PAIRS[0], amountPrecision=-1)
        with pytest.raises(MalformedResponseError):
            normalizer.normalize_market(pair)

    def test_string_status(self, normalizer):
        assert normalizer.normalize_market(dict(MARKET_PAIRS[0], status="active")).active is True
        assert normalizer.normalize_market(dict(MARKET_PAIRS[0], status="suspended")).active is False


class TestNormalizeCurrency:
    def test_lowest_priority_platform_wins(self, normalizer):
        currency = normalizer.normalize_currency({
            "id": "eth",
            "display_name": {"en-us": "Ethereum"},
            "platform": [
                {"priority": 2, "precision": 2, "withdrawal_fee": [{"priority": 1, "amount": "1"}]},
                {
                    "priority": 1,
                    "precision": 8,
                    "deposit_suspended": True,
                    "withdrawal_suspended": False,
                    "min_deposit_amount": "0.01",
                    "min_withdrawal_amount": "0.05",
                    "withdrawal_fee": [
                        {"priority": 2, "amount": "0.02"},
                        {"priority": 1, "amount": "0.005"},
                    ],
                },
            ],
        })

        assert currency.code == "ETH"
        assert currency.name == "Ethereum"
        assert currency.precision == 8
        assert currency.active is True
        assert currency.fee == Decimal("0.005")
        assert currency.limits.amount.min == Decimal("1E-8")
        assert currency.limits.amount.max == Decimal("100000000")
        assert currency.limits.deposit.min == Decimal("0.01")
        assert currency.limits.withdraw.min == Decimal("0.05")

    def test_inactive_only_when_both_suspended(self, normalizer):
        currency = normalizer.normalize_currency({
            "id": "XRP",
            "platform": [{"priority": 1, "deposit_suspended": True, "withdrawal_suspended": True}],
        })
        assert currency.active is False
        assert currency.precision is None
        assert currency.fee is None

    def test_missing_id(self, normalizer):
        with pytest.raises(MalformedResponseError):
            normalizer.normalize_currency({"platform": []})


class TestNormalizeTicker:
    def test_derived_open_and_percentage(self):
        ticker = LCXNormalizer.normalize_ticker({
            "symbol": "ETH/BTC",
            "lastPrice": "0.025",
            "change": "0.005",
            "high": "0.026",
            "low": "0.019",
            "bestBid": "0.0249",
            "bestAsk": "0.0251",
            "volume": "15681.986",
            "lastUpdated": 1605937174000,
        })

        assert ticker.open == Decimal("0.020")
        assert ticker.percentage == Decimal("25")
        assert ticker.last == ticker.close == Decimal("0.025")
        assert ticker.bid == Decimal("0.0249")
        assert ticker.ask == Decimal("0.0251")
        assert ticker.quote_volume == ticker.base_volume == Decimal("15681.986")
        assert ticker.average is None
        assert ticker.timestamp == 1605937174000
        assert ticker.datetime == "2020-11-21T05:39:34.000Z"

    def test_zero_open_gives_zero_percentage(self):
        ticker = LCXNormalizer.normalize_ticker({"symbol": "ETH/BTC", "lastPrice": 5, "change": 5})
        assert ticker.open == Decimal("0")
        assert ticker.percentage == Decimal("0")

    def test_missing_change_leaves_open_none(self):
        ticker = LCXNormalizer.normalize_ticker({"symbol": "ETH/BTC", "lastPrice": 5})
        assert ticker.open is None
        assert ticker.percentage is None
        assert ticker.timestamp is None
        assert ticker.datetime is None

    def test_missing_symbol(self):
        with pytest.raises(MalformedResponseError):
            LCXNormalizer.normalize_ticker({"lastPrice": 5})

    def test_high_below_low(self):
        with pytest.raises(MalformedResponseError):
            LCXNormalizer.normalize_ticker({"symbol": "ETH/BTC", "high": 1, "low": 2})


class TestNormalizeTrade:
    def test_seconds_are_scaled_to_milliseconds(self):
        trade = LCXNormalizer.normalize_trade([0.023, 0.1, "BUY", 1605937174], "ETH/BTC")

        assert trade.id == "1605937174"
        assert trade.timestamp == 1605937174000
        assert trade.side is TradeSide.BUY
        assert trade.is_buy
        assert trade.price == Decimal("0.023")
        assert trade.amount == Decimal("0.1")
        assert trade.cost == Decimal("0.0023")
        assert trade.symbol == "ETH/BTC"

    def test_millisecond_timestamps_are_kept(self):
        trade = LCXNormalizer.normalize_trade(["10", "2", "SELL", 1605937174123])
        assert trade.timestamp == 1605937174123
        assert trade.side is TradeSide.SELL
        assert trade.symbol is None

    def test_unknown_side(self):
        with pytest.raises(MalformedResponseError):
            LCXNormalizer.normalize_trade([1, 1, "HOLD", 1605937174])

    @pytest.mark.parametrize("payload", [[1, 1, "BUY"], {"price": 1}, None])
    def test_wrong_arity(self, payload):
        with pytest.raises(MalformedResponseError):
            LCXNormalizer.normalize_trade(payload)


class TestNormalizeOrderBook:
    def test_sorting_filtering_and_limit(self):
        book = LCXNormalizer.normalize_order_book(
            {
                "buy": [[0.0288, 1], [0.0290, 2], [0.0289, 0], [0.0287, 3]],
                "sell": [[0.0295, 1], [0.0291, 0], [0.0293, 4], [0.0294, 2]],
            },
            "ETH/BTC",
            limit=2,
        )

        assert [level.price for level in book.bids] == [Decimal("0.029"), Decimal("0.0288")]
        assert [level.price for level in book.asks] == [Decimal("0.0293"), Decimal("0.0294")]
        assert book.best_bid == Decimal("0.029")
        assert book.spread == Decimal("0.0003")
        assert book.nonce is None
        assert book.timestamp is None

    def test_empty_sides(self):
        book = LCXNormalizer.normalize_order_book({}, "ETH/BTC")
        assert book.bids == []
        assert book.asks == []
        assert book.spread is None

    def test_bad_level(self):
        with pytest.raises(MalformedResponseError):
            LCXNormalizer.normalize_order_book({"buy": [[1]]}, "ETH/BTC")


class TestNormalizeOrder:
    def test_open_limit_order(self):
        order = LCXNormalizer.normalize_order(ORDER_PAYLOAD)

        assert order.id == ORDER_PAYLOAD["Id"]
        assert order.type == "limit"
        assert order.side == "buy"
        assert order.status == "open"
        assert order.is_open
        assert order.price == Decimal("0.023")
        assert order.client_order_id is None
        assert order.symbol == "ETH/BTC"
        assert order.datetime == "2020-11-21T05:39:34.000Z"

    def test_remaining_includes_canceled_quantity(self):
        order = LCXNormalizer.normalize_order(
            dict(ORDER_PAYLOAD, Status="CANCELLED", Filled=3, Amount=2, cancelled_quantity=1)
        )
        assert order.remaining == Decimal("3")
        assert order.filled == Decimal("3")
        assert order.status == "canceled"

    def test_market_order_has_no_price(self):
        order = LCXNormalizer.normalize_order(dict(ORDER_PAYLOAD, OrderType="MARKET", Status="FILLED"))
        assert order.type == "market"
        assert order.price is None
        assert order.status == "closed"

    def test_client_order_id_kept(self):
        order = LCXNormalizer.normalize_order(dict(ORDER_PAYLOAD, client_order_id="abc"))
        assert order.client_order_id == "abc"

    @pytest.mark.parametrize("field", ["Id", "Side", "OrderType", "Status"])
    def test_missing_required_field(self, field):
        payload = {k: v for k, v in ORDER_PAYLOAD.items() if k != field}
        with pytest.raises(MalformedResponseError):
            LCXNormalizer.normalize_order(payload)

    def test_status_mapping(self):
        assert LCXNormalizer.parse_order_status("filled") == "closed"
        assert LCXNormalizer.parse_order_status("cancelled") == "canceled"
        assert LCXNormalizer.parse_order_status("open") == "open"
        assert LCXNormalizer.parse_order_status("unknown_status") == "unknown_status"
        assert LCXNormalizer.parse_order_status(None) is None

    def test_status_mapping_ignores_case(self):
        assert LCXNormalizer.parse_order_status("FILLED") == "closed"
        assert LCXNormalizer.parse_order_status("Cancelled") == "canceled"
        assert LCXNormalizer.parse_order_status("PARTIAL") == "partial"

    def test_status_mapping_is_idempotent(self):
        for status in ("open", "cancelled", "filled", "partial"):
            once = LCXNormalizer.parse_order_status(status)
            assert LCXNormalizer.parse_order_status(once) == once


class TestNormalizeTransaction:
    def test_withdrawal(self, normalizer):
        tx = normalizer.normalize_transaction({
            "id": "42",
            "currency_id": "cbc",
            "amount": "10.5",
            "address": "0xabc",
            "destination_tag": "7",
            "status": "confirming",
            "type": "withdrawal",
            "hash": "0xdeadbeef",
            "time": "2020-11-21T05:39:34.000Z",
            "fee": "0.1",
        })

        assert tx.currency == "CryptoBharatCoin"
        assert tx.status == "pending"
        assert tx.amount == Decimal("10.5")
        assert tx.timestamp == 1605937174000
        assert tx.fee is not None
        assert tx.fee.cost == Decimal("0.1")
        assert tx.fee.currency == "CryptoBharatCoin"
        assert tx.txid == "0xdeadbeef"
        assert tx.tag == "7"

    def test_zero_fee_is_omitted(self, normalizer):
        tx = normalizer.normalize_transaction({"id": "1", "currency_id": "ETH", "status": "done", "fee": "0"})
        assert tx.fee is None
        assert tx.status == "ok"

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("requested", "pending"),
            ("applying", "pending"),
            ("done", "ok"),
            ("cancelling", "canceled"),
            ("cancelled", "canceled"),
            ("failed", "failed"),
        ],
    )
    def test_status_mapping(self, status, expected):
        assert LCXNormalizer.parse_transaction_status(status) == expected


class TestNormalizeOHLCV:
    def test_candle(self):
        candle = LCXNormalizer.normalize_ohlcv({
            "open": "0.02811",
            "close": "0.02812",
            "low": "0.0281",
            "high": "0.02815",
            "base_volume": "0.0005",
            "start_time": "2018-11-30T18:19:00.000Z",
        })
        assert candle.timestamp == 1543601940000
        assert candle.open == Decimal("0.02811")
        assert candle.high == Decimal("0.02815")
        assert candle.low == Decimal("0.0281")
        assert candle.close == Decimal("0.02812")
        assert candle.volume == Decimal("0.0005")

    def test_missing_start_time(self):
        with pytest.raises(MalformedResponseError):
            LCXNormalizer.normalize_ohlcv({"open": 1})


class TestNormalizeOHLCVTimestamp:
    def test_week_aligns_to_sunday(self):
        assert LCXNormalizer.normalize_ohlcv_timestamp(259200000, "1w") == "1970-01-04T00:00:00.000Z"
        assert LCXNormalizer.normalize_ohlcv_timestamp(259200000, "1w", after=True) == "1970-01-11T00:00:00.000Z"

    def test_week_mid_week(self):
        # 2020-11-21 is a Saturday
        assert LCXNormalizer.normalize_ohlcv_timestamp(1605937174000, "1w") == "2020-11-15T00:00:00.000Z"

    def test_hour_floor(self):
        assert LCXNormalizer.normalize_ohlcv_timestamp(1605937174000, "1h") == "2020-11-21T05:00:00.000Z"
        assert LCXNormalizer.normalize_ohlcv_timestamp(1605937174000, "1h", after=True) == "2020-11-21T06:00:00.000Z"

    def test_month(self):
        assert LCXNormalizer.normalize_ohlcv_timestamp(1605937174000, "1M") == "2020-11-01T00:00:00.000Z"
        assert LCXNormalizer.normalize_ohlcv_timestamp(1605937174000, "1M", after=True) == "2020-12-01T00:00:00.000Z"

    def test_december_rolls_into_next_year(self):
        december = 1607990400000  # 2020-12-15T00:00:00Z
        assert LCXNormalizer.normalize_ohlcv_timestamp(december, "1M", after=True) == "2021-01-01T00:00:00.000Z"

    def test_unsupported_timeframe(self):
        with pytest.raises(InvalidRequestError):
            LCXNormalizer.normalize_ohlcv_timestamp(0, "2d")

    def test_week_before_first_sunday(self):
        with pytest.raises(InvalidRequestError):
            LCXNormalizer.normalize_ohlcv_timestamp(100000000, "1w")
        # the next edge is the first Sunday itself
        assert LCXNormalizer.normalize_ohlcv_timestamp(100000000, "1w", after=True) == "1970-01-04T00:00:00.000Z"

    def test_month_before_epoch(self):
        with pytest.raises(InvalidRequestError):
            LCXNormalizer.normalize_ohlcv_timestamp(-1, "1M")


class TestNormalizeBalance:
    def test_completion_rule(self, normalizer):
        balance = normalizer.normalize_balance([
            {"coin": "ETH", "balance": {"freeBalance": 1.5, "occupiedBalance": 0.5}},
            {"coin": "BTC", "balance": {"totalBalance": 2, "occupiedBalance": 0.5}},
            {"coin": "EUR", "balance": {"totalBalance": 100, "freeBalance": 60}},
            {"coin": "CBC", "balance": {"totalBalance": 1, "freeBalance": 1, "occupiedBalance": 0}},
        ])

        assert balance.get("ETH").total == Decimal("2.0")
        assert balance.get("BTC").free == Decimal("1.5")
        assert balance.get("EUR").used == Decimal("40")
        assert "CryptoBharatCoin" in balance.balances
        assert balance.total["CryptoBharatCoin"] == Decimal("1")
        assert len(balance.info) == 4

    def test_missing_coin(self, normalizer):
        with pytest.raises(MalformedResponseError):
            normalizer.normalize_balance([{"balance": {}}])

    def test_not_a_list(self, normalizer):
        with pytest.raises(MalformedResponseError):
            normalizer.normalize_balance({"coin": "ETH"})
