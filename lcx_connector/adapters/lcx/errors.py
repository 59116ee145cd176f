"""
LCX error envelope classifier.

A failed call answers with ``{"errorCode": "...", "message": "..."}``. The
classifier maps it to exactly one exception from ``lcx_connector.exceptions``:

1. ``message`` equal to a known code raises that code's failure.
2. Otherwise a known code contained in ``errorCode`` raises its failure;
   the longest such code wins.
3. Otherwise a bare ExchangeError is raised.
"""

from typing import Any, Dict, Optional, Type

import structlog

from lcx_connector.exceptions import (
    AuthenticationError,
    DuplicateAddressError,
    ExchangeError,
    InsufficientFundsError,
    InvalidOrderError,
    InvalidRequestError,
    RateLimitExceededError,
    ServiceUnavailableError,
    TooManyOpenOrdersError,
    UnknownCurrencyError,
    UnknownSymbolError,
    UnsupportedCombinationError,
)

logger = structlog.get_logger(__name__)

EXCEPTIONS: Dict[str, Type[ExchangeError]] = {
    "UNAUTHORIZED": AuthenticationError,
    "INVALID_ARGUMENT": InvalidRequestError,
    "TRADING_UNAVAILABLE": ServiceUnavailableError,
    "NOT_ENOUGH_BALANCE": InsufficientFundsError,
    "NOT_ALLOWED_COMBINATION": UnsupportedCombinationError,
    "INVALID_ORDER": InvalidOrderError,
    "RATE_LIMIT_EXCEEDED": RateLimitExceededError,
    "MARKET_UNAVAILABLE": ServiceUnavailableError,
    "INVALID_MARKET": UnknownSymbolError,
    "INVALID_CURRENCY": UnknownCurrencyError,
    "TOO_MANY_OPEN_ORDERS": TooManyOpenOrdersError,
    "DUPLICATE_ADDRESS": DuplicateAddressError,
}


class LCXErrorClassifier:
    """
    Raises a typed failure for an LCX error envelope.

    Example:
        >>> LCXErrorClassifier.handle_errors({"errorCode": "NOT_ENOUGH_BALANCE"}, "...")
        Traceback (most recent call last):
        ...
        lcx_connector.exceptions.InsufficientFundsError: lcx ...
    """

    exceptions: Dict[str, Type[ExchangeError]] = EXCEPTIONS

    @classmethod
    def classify(cls, error_code: str, message: Optional[str]) -> Type[ExchangeError]:
        """Return the failure class for an error code and message."""
        if message is not None and message in cls.exceptions:
            return cls.exceptions[message]

        broad_matches = [key for key in cls.exceptions if key in error_code]
        if broad_matches:
            return cls.exceptions[max(broad_matches, key=len)]

        return ExchangeError

    @classmethod
    def handle_errors(cls, response: Any, body: str) -> None:
        """
        Raise if ``response`` is an error envelope; do nothing otherwise.

        Args:
            response: Parsed JSON response.
            body: Raw response text, attached as ``feedback``.

        Raises:
            ExchangeError: Or the subclass matching the error code.
        """
        if not isinstance(response, dict) or "errorCode" not in response:
            return

        error_code = response.get("errorCode")
        if error_code is None:
            return
        error_code = str(error_code)
        message = response.get("message")
        message = str(message) if message is not None else None

        feedback = f"lcx {body}"
        failure = cls.classify(error_code, message)

        logger.warning(
            "lcx_error_response",
            exchange="lcx",
            error_code=error_code,
            message=message,
            failure=failure.__name__,
        )
        raise failure(feedback, code=error_code, feedback=body)
