"""
LCX request signer.

Builds the URL, body and authentication headers of a request. Public and
accounts calls are sent unsigned; private calls carry an HMAC-SHA256
signature over the method, the ``api/`` prefixed path and the JSON body.

Signature:
    payload   = METHOD + "/" + "api/" + path            (GET)
    payload   = METHOD + "/" + "api/" + path + JSON(q)  (POST)
    signature = base64(HMAC-SHA256(secret, payload))

Headers:
    x-access-key:       API key
    x-access-sign:      signature
    x-access-timestamp: nonce in epoch milliseconds
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import structlog
from ccxt.base.exchange import Exchange

from lcx_connector.config.models import ApiUrls
from lcx_connector.exceptions import AuthenticationError, InvalidRequestError

logger = structlog.get_logger(__name__)


def milliseconds() -> int:
    """Return the wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """Serialize a request body compactly, the way the venue expects it signed."""
    return json.dumps(value, separators=(",", ":"), default=_json_default)


def extract_params(path: str) -> List[str]:
    """
    Return the ``{name}`` placeholders of a path.

    Example:
        >>> extract_params("order/{id}/fills")
        ['id']
    """
    return Exchange.extract_params(path)


def implode_params(path: str, params: Dict[str, Any]) -> str:
    """
    Substitute ``{name}`` placeholders with values from params.

    Raises:
        InvalidRequestError: If a placeholder has no value.
    """
    missing = [name for name in extract_params(path) if name not in params]
    if missing:
        raise InvalidRequestError(f"Missing path parameter {missing[0]!r} for {path}")
    return Exchange.implode_params(path, params)


@dataclass(frozen=True)
class SignedRequest:
    """A request ready for the transport."""

    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


class LCXSigner:
    """
    Stateless request builder and signer.

    Every call to ``sign`` reads a fresh nonce, so two signatures never
    share state and the same inputs with the same nonce always produce the
    same signature.

    Example:
        >>> signer = LCXSigner(ApiUrls(), api_key="key", secret="secret")
        >>> request = signer.sign("balances", scope="private")
        >>> request.url
        'https://exchange-api.lcx.com/api/balances'
    """

    def __init__(
        self,
        urls: ApiUrls,
        api_key: Optional[str] = None,
        secret: Optional[str] = None,
        nonce: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize signer.

        Args:
            urls: Base URLs per API scope.
            api_key: Private API key.
            secret: Private API secret.
            nonce: Millisecond clock (defaults to the wall clock).
        """
        self.urls = urls
        self.api_key = api_key
        self.secret = secret
        self._nonce = nonce or milliseconds

    @property
    def has_credentials(self) -> bool:
        """True when both API key and secret are set."""
        return bool(self.api_key) and bool(self.secret)

    def check_required_credentials(self) -> None:
        """
        Raises:
            AuthenticationError: If the API key or secret is missing.
        """
        if not self.has_credentials:
            logger.error("signer_missing_credentials", exchange="lcx")
            raise AuthenticationError("lcx requires apiKey and secret credentials")

    def signature(self, payload: str) -> str:
        """Return base64(HMAC-SHA256(secret, payload))."""
        digest = hmac.new(
            self.secret.encode("utf-8"),
            payload.encode("utf-8"),
            hashlib.sha256,
        ).digest()
        return base64.b64encode(digest).decode("ascii")

    def sign(
        self,
        path: str,
        scope: str = "public",
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
    ) -> SignedRequest:
        """
        Build a request for ``path`` in ``scope``.

        Args:
            path: Endpoint path, may contain ``{name}`` placeholders.
            scope: "public", "private" or "accounts".
            method: HTTP method.
            params: Path, query or body parameters.

        Returns:
            SignedRequest: URL, method, headers and body.

        Raises:
            AuthenticationError: If a private request lacks credentials.
            InvalidRequestError: If the scope is unknown or a placeholder is unfilled.
        """
        params = dict(params or {})
        method = method.upper()
        try:
            base_url = self.urls.for_scope(scope).rstrip("/")
        except ValueError as e:
            raise InvalidRequestError(str(e)) from e

        placeholders = extract_params(path)
        query = {k: v for k, v in params.items() if k not in placeholders}
        headers: Dict[str, str] = {}
        body: Optional[str] = None

        if scope == "private":
            self.check_required_credentials()
            path = f"api/{path}"
            nonce = self._nonce()
            if method == "GET":
                payload = f"{method}/{path}"
            else:
                payload = f"{method}/{path}{to_json(query)}"
            headers = {
                "x-access-key": self.api_key,
                "x-access-sign": self.signature(payload),
                "x-access-timestamp": str(nonce),
            }
            url = f"{base_url}/{implode_params(path, params)}"
            if method == "GET":
                if query:
                    url += "?" + Exchange.urlencode(query)
            elif query:
                body = to_json(query)
        else:
            url = f"{base_url}/{implode_params(path, params)}"
            if method == "GET":
                if query:
                    url += "?" + Exchange.urlencode(query)
            else:
                body = to_json(query)

        if body is not None:
            headers["Content-Type"] = "application/json"

        return SignedRequest(url=url, method=method, headers=headers, body=body)

    def __repr__(self) -> str:
        """Return string representation without secrets."""
        return f"LCXSigner(credentials={'set' if self.has_credentials else 'missing'})"
