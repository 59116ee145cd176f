"""Shared fixtures: a recording transport, a dict cache and sample payloads."""

from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import pytest

from lcx_connector.adapters.lcx.adapter import LCXAdapter
from lcx_connector.adapters.lcx.signer import LCXSigner, SignedRequest
from lcx_connector.config.models import AppConfig, CredentialsConfig
from lcx_connector.interfaces.market_cache import MarketCache

FIXED_NONCE = 1605937174000


class FakeCache(MarketCache):
    """Dict-backed MarketCache that records every call."""

    def __init__(self) -> None:
        self.store: Dict[str, Any] = {}
        self.ttls: Dict[str, int] = {}
        self.gets: List[str] = []
        self.sets: List[str] = []

    async def get(self, key: str) -> Optional[Any]:
        self.gets.append(key)
        return self.store.get(key)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self.sets.append(key)
        self.store[key] = value
        self.ttls[key] = ttl_seconds


class FakeRestClient:
    """Stands in for LCXRestClient: records requests, replays canned responses by path."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self.responses: Dict[str, Any] = dict(responses or {})
        self.requests: List[SignedRequest] = []
        self.closed = False

    @staticmethod
    def path_of(signed: SignedRequest) -> str:
        return urlsplit(signed.url).path.lstrip("/")

    async def request(self, signed: SignedRequest) -> Any:
        self.requests.append(signed)
        response = self.responses[self.path_of(signed)]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True

    @property
    def paths(self) -> List[str]:
        return [self.path_of(signed) for signed in self.requests]


MARKET_PAIRS = [
    {
        "symbol": "ETH/BTC",
        "base": "ETH",
        "quote": "BTC",
        "status": True,
        "amountPrecision": 4,
        "pricePrecision": 6,
        "minBaseOrder": 0.001,
        "maxBaseOrder": 1000,
        "minQuoteOrder": 0.0001,
        "maxQuoteOrder": 100,
        "taker_fee_rate": 0.3,
        "maker_fee_rate": 0.1,
    },
    {
        "symbol": "LCX/EUR",
        "base": "LCX",
        "quote": "EUR",
        "status": True,
        "amountPrecision": 2,
        "pricePrecision": 4,
    },
    {
        "symbol": "CBC/EUR",
        "base": "CBC",
        "quote": "EUR",
        "status": False,
        "amountPrecision": 0,
        "pricePrecision": 0.5,
    },
]

ORDER_PAYLOAD = {
    "Id": "b5d4c1d5-0d4a-4e9b-b0e2-3f4a6e5d7c21",
    "Pair": "ETH/BTC",
    "OrderType": "LIMIT",
    "Side": "BUY",
    "Status": "OPEN",
    "Price": 0.023,
    "Amount": 2,
    "Filled": 0,
    "Average": 0,
    "Cost": 0,
    "UpdatedAt": 1605937174000,
    "cancelled_quantity": 0,
    "client_order_id": "",
}


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(credentials=CredentialsConfig(api_key="test-key", secret="test-secret"))


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def rest() -> FakeRestClient:
    return FakeRestClient({"market/pairs": {"status": "success", "data": MARKET_PAIRS}})


@pytest.fixture
def signer(config: AppConfig) -> LCXSigner:
    return LCXSigner(
        config.exchange.urls,
        api_key=config.credentials.api_key,
        secret=config.credentials.secret,
        nonce=lambda: FIXED_NONCE,
    )


@pytest.fixture
def adapter(config: AppConfig, cache: FakeCache, rest: FakeRestClient, signer: LCXSigner) -> LCXAdapter:
    return LCXAdapter(config, cache, rest=rest, signer=signer)
