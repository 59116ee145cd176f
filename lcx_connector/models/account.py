"""
Account models: balances, transactions and access tokens.

Models:
    BalanceEntry: free/used/total for one currency
    Balance: All currency balances of the account
    TransactionFee: Fee charged on a deposit or withdrawal
    Transaction: Normalized deposit or withdrawal
    AccessToken: Token issued by the client-credentials grant
"""

import time
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BalanceEntry(BaseModel):
    """
    Balance of one currency.

    Attributes:
        free: Available for trading.
        used: Locked in open orders.
        total: free + used.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    free: Optional[Decimal] = None
    used: Optional[Decimal] = None
    total: Optional[Decimal] = None


class Balance(BaseModel):
    """
    All currency balances of the account.

    Attributes:
        balances: BalanceEntry keyed by unified currency code.
        info: Raw venue payload.

    Example:
        >>> balance.get("BTC").free
        Decimal('0.5')
    """

    model_config = {"frozen": True, "extra": "forbid"}

    balances: Dict[str, BalanceEntry] = Field(default_factory=dict)
    info: List[Any] = Field(default_factory=list)

    def get(self, code: str) -> Optional[BalanceEntry]:
        """Return the balance of ``code``, or None if the account has none."""
        return self.balances.get(code)

    @property
    def free(self) -> Dict[str, Optional[Decimal]]:
        """Free amount keyed by currency code."""
        return {code: entry.free for code, entry in self.balances.items()}

    @property
    def used(self) -> Dict[str, Optional[Decimal]]:
        """Used amount keyed by currency code."""
        return {code: entry.used for code, entry in self.balances.items()}

    @property
    def total(self) -> Dict[str, Optional[Decimal]]:
        """Total amount keyed by currency code."""
        return {code: entry.total for code, entry in self.balances.items()}


class TransactionFee(BaseModel):
    """Fee charged on a transaction."""

    model_config = {"frozen": True, "extra": "forbid"}

    currency: Optional[str] = None
    cost: Decimal


class Transaction(BaseModel):
    """
    Normalized deposit or withdrawal.

    Attributes:
        id: Venue transaction id.
        currency: Unified currency code.
        amount: Transferred amount.
        address: Destination address.
        tag: Destination tag or memo.
        status: "pending", "ok" or "canceled" (unknown statuses pass through).
        type: Venue transaction type.
        txid: On-chain hash.
        timestamp: Creation time in milliseconds.
        datetime: ISO-8601 form of ``timestamp``.
        fee: Fee, present only when non-zero.
        info: Raw venue payload.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[str] = None
    currency: Optional[str] = None
    amount: Optional[Decimal] = None
    address: Optional[str] = None
    tag: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    txid: Optional[str] = None
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    fee: Optional[TransactionFee] = None
    info: Dict[str, Any] = Field(default_factory=dict)


class AccessToken(BaseModel):
    """
    Token issued by the accounts ``token`` endpoint.

    Attributes:
        access_token: Opaque bearer token.
        token_type: Token scheme, usually "bearer".
        expires_in: Lifetime in seconds as reported by the venue.
        expires_at: Absolute expiry in epoch milliseconds.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    access_token: str = Field(..., min_length=1)
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., ge=0)
    expires_at: int = Field(..., ge=0)

    def is_expired(self, now_ms: Optional[int] = None) -> bool:
        """
        Check whether the token can still be used.

        Args:
            now_ms: Current time in epoch milliseconds (defaults to wall clock).

        Returns:
            bool: True once ``expires_at`` has been reached.
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return now_ms >= self.expires_at

    @property
    def authorization(self) -> str:
        """Value for the HTTP Authorization header."""
        return f"{self.token_type.capitalize()} {self.access_token}"
