"""
Typed failures raised by the connector.

Venue error envelopes are classified onto this hierarchy exactly once, right
after a response arrives. None of these are retried inside the connector;
callers decide whether a failure is worth another attempt (a new attempt
must be re-signed with a fresh nonce).

Hierarchy:
    ExchangeError
    ├── AuthenticationError
    ├── InvalidRequestError
    │   ├── UnsupportedCombinationError
    │   ├── UnknownSymbolError
    │   └── UnknownCurrencyError
    ├── ServiceUnavailableError
    ├── InsufficientFundsError
    ├── InvalidOrderError
    ├── RateLimitExceededError
    ├── TooManyOpenOrdersError
    ├── DuplicateAddressError
    └── MalformedResponseError
"""

from typing import Optional


class ExchangeError(Exception):
    """
    Base class for every venue failure, and the catch-all for unmapped codes.

    Attributes:
        message: Human readable description.
        code: Venue error code, if the failure came from an error envelope.
        feedback: Raw response body or other context for debugging.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        feedback: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.feedback = feedback
        super().__init__(message)


class AuthenticationError(ExchangeError):
    """Missing, malformed or rejected credentials."""


class InvalidRequestError(ExchangeError):
    """Parameters are malformed, empty or out of range."""


class UnsupportedCombinationError(InvalidRequestError):
    """The venue does not allow this combination of order parameters."""


class UnknownSymbolError(InvalidRequestError):
    """The requested market does not exist."""


class UnknownCurrencyError(InvalidRequestError):
    """The requested currency does not exist."""


class ServiceUnavailableError(ExchangeError):
    """Market or trading is temporarily closed."""


class InsufficientFundsError(ExchangeError):
    """Not enough balance for the requested operation."""


class InvalidOrderError(ExchangeError):
    """The order does not exist or does not belong to this account."""


class RateLimitExceededError(ExchangeError):
    """Requests are being sent too frequently."""


class TooManyOpenOrdersError(ExchangeError):
    """The account has reached its open order limit."""


class DuplicateAddressError(ExchangeError):
    """Address already exists in the withdrawal address list."""


class MalformedResponseError(ExchangeError):
    """
    A response could not be decoded into a canonical entity.

    Raised for missing required fields, positional arrays of the wrong
    arity, unrecognized enumerated values and non-JSON bodies. Distinct from
    failures the venue reports itself.
    """
