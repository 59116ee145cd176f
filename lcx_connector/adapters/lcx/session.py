"""
Caller-owned access-token session.

``LCXAdapter.sign_in`` stores the token issued by the accounts endpoint on
an LCXSession; before each private call the adapter asks the session for
headers. An expired token is dropped, not refreshed.
"""

from typing import Any, Dict, Optional

import structlog

from lcx_connector.adapters.lcx.signer import milliseconds
from lcx_connector.exceptions import MalformedResponseError
from lcx_connector.models.account import AccessToken

logger = structlog.get_logger(__name__)


class LCXSession:
    """Holds at most one access token and its absolute expiry."""

    def __init__(self, token: Optional[AccessToken] = None):
        self._token = token

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    def store(self, response: Dict[str, Any], now_ms: Optional[int] = None) -> AccessToken:
        """
        Store the token from a ``token`` endpoint response.

        Args:
            response: ``{"access_token": ..., "token_type": "bearer", "expires_in": 900}``.
            now_ms: Issue time in epoch milliseconds (defaults to wall clock).

        Returns:
            AccessToken: The stored token.

        Raises:
            MalformedResponseError: If the response lacks a token or lifetime.
        """
        if now_ms is None:
            now_ms = milliseconds()
        access_token = response.get("access_token") if isinstance(response, dict) else None
        expires_in = response.get("expires_in") if isinstance(response, dict) else None
        if not access_token or expires_in is None:
            logger.error("access_token_response_invalid", exchange="lcx")
            raise MalformedResponseError("Token response must contain access_token and expires_in")

        try:
            expires_in = int(expires_in)
            token = AccessToken(
                access_token=str(access_token),
                token_type=str(response.get("token_type") or "bearer"),
                expires_in=expires_in,
                expires_at=now_ms + expires_in * 1000,
            )
        except (ValueError, TypeError) as e:
            raise MalformedResponseError(f"Invalid token response: {e}") from e

        self._token = token
        logger.info("access_token_stored", exchange="lcx", expires_at=token.expires_at)
        return token

    def current(self, now_ms: Optional[int] = None) -> Optional[AccessToken]:
        """Return the live token, discarding it first if it has expired."""
        if self._token is not None and self._token.is_expired(now_ms):
            logger.info(
                "access_token_expired",
                exchange="lcx",
                expires_at=self._token.expires_at,
            )
            self._token = None
        return self._token

    def headers(self, now_ms: Optional[int] = None) -> Dict[str, str]:
        """Return the Authorization header for a live token, or nothing."""
        token = self.current(now_ms)
        if token is None:
            return {}
        return {"Authorization": token.authorization}

    def clear(self) -> None:
        """Forget the stored token."""
        self._token = None

    def __repr__(self) -> str:
        return f"LCXSession(authenticated={self._token is not None})"
