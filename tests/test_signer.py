"""Tests for LCXSigner."""

import base64
import hashlib
import hmac
import json
from decimal import Decimal

import pytest

from conftest import FIXED_NONCE
from lcx_connector.adapters.lcx.signer import (
    LCXSigner,
    extract_params,
    implode_params,
    to_json,
)
from lcx_connector.config.models import ApiUrls
from lcx_connector.exceptions import AuthenticationError, InvalidRequestError

BASE = "https://exchange-api.lcx.com"


def expected_signature(secret: str, payload: str) -> str:
    digest = hmac.new(secret.encode(), payload.encode(), hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


class TestPathParams:
    def test_extract_and_implode(self):
        assert extract_params("order/{id}/fills/{page}") == ["id", "page"]
        assert implode_params("order/{id}", {"id": 42}) == "order/42"

    def test_missing_placeholder_value(self):
        with pytest.raises(InvalidRequestError):
            implode_params("order/{id}", {})

    def test_placeholders_are_removed_from_query(self):
        signer = LCXSigner(ApiUrls())
        request = signer.sign("order/{id}", params={"id": 7, "detail": "full"})
        assert request.url == f"{BASE}/order/7?detail=full"


class TestPublicSigning:
    def test_get_query_string(self):
        request = LCXSigner(ApiUrls()).sign("market/pairs", "public", "GET", {"a": 1, "b": "x y"})
        assert request.url == f"{BASE}/market/pairs?a=1&b=x%20y"
        assert request.method == "GET"
        assert request.body is None
        assert request.headers == {}

    def test_query_string_encoding(self):
        request = LCXSigner(ApiUrls()).sign("market/trades", params={"pair": "ETH/BTC", "all": True})
        assert request.url == f"{BASE}/market/trades?pair=ETH%2FBTC&all=true"

    def test_get_without_params(self):
        request = LCXSigner(ApiUrls()).sign("market/pairs")
        assert request.url == f"{BASE}/market/pairs"

    def test_post_json_body(self):
        request = LCXSigner(ApiUrls()).sign("order/book", "public", "POST", {"pair": "LCX/EUR"})
        assert request.url == f"{BASE}/order/book"
        assert request.body == '{"pair":"LCX/EUR"}'
        assert request.headers == {"Content-Type": "application/json"}

    def test_accounts_scope_is_unsigned(self):
        urls = ApiUrls(accounts="https://accounts.example.com")
        request = LCXSigner(urls).sign("token", "accounts", "POST", {"grant_type": "client_credentials"})
        assert request.url == "https://accounts.example.com/token"
        assert "x-access-sign" not in request.headers
        assert json.loads(request.body) == {"grant_type": "client_credentials"}

    def test_unknown_scope(self):
        with pytest.raises(InvalidRequestError):
            LCXSigner(ApiUrls()).sign("x", scope="internal")


class TestPrivateSigning:
    def test_get_signature(self, signer):
        request = signer.sign("balances", "private", "GET")

        assert request.url == f"{BASE}/api/balances"
        assert request.body is None
        assert request.headers["x-access-key"] == "test-key"
        assert request.headers["x-access-timestamp"] == str(FIXED_NONCE)
        assert request.headers["x-access-sign"] == expected_signature("test-secret", "GET/api/balances")

    def test_post_signature_covers_body(self, signer):
        params = {"Pair": "ETH/BTC", "Amount": Decimal("1.5"), "OrderType": "LIMIT"}
        request = signer.sign("create", "private", "POST", params)

        body = '{"Pair":"ETH/BTC","Amount":1.5,"OrderType":"LIMIT"}'
        assert request.url == f"{BASE}/api/create"
        assert request.body == body
        assert request.headers["x-access-sign"] == expected_signature("test-secret", "POST/api/create" + body)
        assert request.headers["Content-Type"] == "application/json"

    def test_post_without_params_has_no_body(self, signer):
        request = signer.sign("open", "private", "POST")
        assert request.body is None
        assert request.headers["x-access-sign"] == expected_signature("test-secret", "POST/api/open{}")

    def test_deterministic_for_fixed_nonce(self, signer):
        first = signer.sign("open", "private", "POST", {"offset": 1})
        second = signer.sign("open", "private", "POST", {"offset": 1})
        assert first == second

    @pytest.mark.parametrize(
        "path,method,params",
        [
            ("open", "GET", {"offset": 1}),
            ("orderHistory", "POST", {"offset": 1}),
            ("open", "POST", {"offset": 2}),
        ],
    )
    def test_inputs_change_signature(self, signer, path, method, params):
        base = signer.sign("open", "private", "POST", {"offset": 1})
        changed = signer.sign(path, "private", method, params)
        assert changed.headers["x-access-sign"] != base.headers["x-access-sign"]

    def test_secret_changes_signature(self, signer):
        other = LCXSigner(ApiUrls(), api_key="test-key", secret="other", nonce=lambda: FIXED_NONCE)
        assert (
            other.sign("balances", "private").headers["x-access-sign"]
            != signer.sign("balances", "private").headers["x-access-sign"]
        )

    def test_fresh_nonce_per_call(self):
        ticks = iter([1000, 2000])
        signer = LCXSigner(ApiUrls(), api_key="k", secret="s", nonce=lambda: next(ticks))
        assert signer.sign("balances", "private").headers["x-access-timestamp"] == "1000"
        assert signer.sign("balances", "private").headers["x-access-timestamp"] == "2000"

    @pytest.mark.parametrize("api_key,secret", [(None, "s"), ("k", None), ("", "")])
    def test_missing_credentials(self, api_key, secret):
        signer = LCXSigner(ApiUrls(), api_key=api_key, secret=secret)
        with pytest.raises(AuthenticationError):
            signer.sign("balances", "private")

    def test_repr_hides_secret(self, signer):
        assert "test-secret" not in repr(signer)


def test_to_json_is_compact():
    assert to_json({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'
