"""
LCX REST API client.

Performs signed requests built by LCXSigner, enforces the venue's minimum
delay between calls and classifies error envelopes.

Base URL: https://exchange-api.lcx.com

Response Format (success):
    {"status": "success", "message": "...", "data": ...}

Response Format (failure):
    {"errorCode": "NOT_ENOUGH_BALANCE", "message": "NOT_ENOUGH_BALANCE"}
"""

import asyncio
import json
from typing import Any, Optional

import aiohttp
import structlog

from lcx_connector.adapters.lcx.errors import LCXErrorClassifier
from lcx_connector.adapters.lcx.signer import SignedRequest
from lcx_connector.exceptions import MalformedResponseError, RateLimitExceededError

logger = structlog.get_logger(__name__)


class LCXRestClient:
    """
    Async REST API client for LCX.

    Attributes:
        base_url: REST API base URL (used for logging only; signed requests
            carry absolute URLs).
        rate_limit_ms: Minimum delay between two requests in milliseconds.
        timeout_seconds: Total timeout of one request.

    Example:
        >>> client = LCXRestClient(base_url="https://exchange-api.lcx.com")
        >>> response = await client.request(signer.sign("market/pairs"))
        >>> pairs = response["data"]
        >>> await client.close()
    """

    def __init__(
        self,
        base_url: str,
        rate_limit_ms: int = 250,
        timeout_seconds: int = 10,
    ):
        """
        Initialize REST client.

        Args:
            base_url: REST API base URL.
            rate_limit_ms: Minimum delay between requests in milliseconds.
            timeout_seconds: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.rate_limit_ms = rate_limit_ms
        self.timeout_seconds = timeout_seconds

        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time: float = 0.0
        self._request_interval = rate_limit_ms / 1000.0
        self._rate_limit_lock = asyncio.Lock()

        logger.info(
            "rest_client_initialized",
            exchange="lcx",
            base_url=self.base_url,
            rate_limit_ms=rate_limit_ms,
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session is created."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": "lcx-connector/0.1"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session. Safe to call more than once."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("rest_client_session_closed", exchange="lcx", base_url=self.base_url)
        self._session = None

    async def _rate_limit(self) -> None:
        """Wait until ``rate_limit_ms`` has passed since the previous request."""
        # Concurrent callers queue on the lock so each one gets its own slot
        async with self._rate_limit_lock:
            loop = asyncio.get_running_loop()
            time_since_last = loop.time() - self._last_request_time

            if time_since_last < self._request_interval:
                await asyncio.sleep(self._request_interval - time_since_last)

            self._last_request_time = loop.time()

    async def request(self, signed: SignedRequest) -> Any:
        """
        Send a signed request and return the parsed JSON response.

        Args:
            signed: Request built by LCXSigner.

        Returns:
            Any: Parsed response envelope.

        Raises:
            RateLimitExceededError: If the venue answers 429 without an error envelope.
            MalformedResponseError: If the body is not JSON.
            ExchangeError: Or a subclass, for an error envelope.
            ConnectionError: On other HTTP errors, client errors and timeouts.
        """
        await self._rate_limit()

        session = await self._ensure_session()
        url = signed.url

        try:
            async with session.request(
                signed.method,
                url,
                headers=signed.headers,
                data=signed.body,
            ) as response:
                status = response.status
                text = await response.text()
        except aiohttp.ClientError as e:
            logger.error("rest_client_error", exchange="lcx", url=url, error=str(e))
            raise ConnectionError(f"REST request failed: {e}") from e
        except asyncio.TimeoutError as e:
            logger.error("rest_timeout", exchange="lcx", url=url, timeout=self.timeout_seconds)
            raise ConnectionError(f"REST request timeout after {self.timeout_seconds}s") from e

        return self._handle_response(url, status, text)

    def _handle_response(self, url: str, status: int, text: str) -> Any:
        """Decode the body, classify error envelopes and check the HTTP status."""
        data: Any = None
        if text:
            try:
                data = json.loads(text)
            except ValueError:
                data = None

        # Error envelopes take precedence over the HTTP status
        LCXErrorClassifier.handle_errors(data, text)

        if status == 429:
            logger.warning("rest_rate_limited", exchange="lcx", url=url)
            raise RateLimitExceededError(f"lcx rate limited: {text}", feedback=text)

        if status >= 400:
            logger.error(
                "rest_request_failed",
                exchange="lcx",
                url=url,
                status=status,
                error=text,
            )
            raise ConnectionError(f"REST request failed with status {status}: {text}")

        if data is None:
            logger.error("rest_malformed_response", exchange="lcx", url=url, status=status)
            raise MalformedResponseError(f"lcx returned a non-JSON body: {text!r}", feedback=text)

        return data

    def __repr__(self) -> str:
        """Return string representation."""
        return f"LCXRestClient(base_url={self.base_url}, rate_limit={self.rate_limit_ms}ms)"
