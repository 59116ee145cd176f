"""
Pydantic models for application configuration.

This module defines the configuration models validated when loading
``config/lcx.yaml``. The models provide sensible defaults for every
optional setting so an empty section is valid.

Example:
    >>> from lcx_connector.config.models import AppConfig
    >>> config = AppConfig()
    >>> config.exchange.urls.private
    'https://exchange-api.lcx.com'
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CacheBackend(str, Enum):
    """Market cache backends."""

    REDIS = "redis"
    MEMORY = "memory"


# =============================================================================
# EXCHANGE CONFIGURATION
# =============================================================================


class ApiUrls(BaseModel):
    """REST base URLs per API scope."""

    model_config = {"frozen": True, "extra": "forbid"}

    public: str = Field(
        default="https://exchange-api.lcx.com",
        description="Base URL for unauthenticated market data",
    )
    private: str = Field(
        default="https://exchange-api.lcx.com",
        description="Base URL for signed trading endpoints",
    )
    accounts: str = Field(
        default="https://exchange-api.lcx.com",
        description="Base URL for the token endpoint",
    )

    def for_scope(self, scope: str) -> str:
        """
        Return the base URL of an API scope.

        Args:
            scope: "public", "private" or "accounts".

        Raises:
            ValueError: If the scope is unknown.
        """
        if scope not in ("public", "private", "accounts"):
            raise ValueError(f"Unknown API scope: {scope}")
        return getattr(self, scope)


class ConnectionSettings(BaseModel):
    """HTTP connection settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    rate_limit_ms: int = Field(
        default=250,
        description="Minimum delay between two requests",
        ge=0,
        le=60000,
    )
    timeout_seconds: int = Field(
        default=10,
        description="Total request timeout",
        ge=1,
        le=300,
    )


class TradingFees(BaseModel):
    """Default trading fees as fractions, used when a market omits its own."""

    model_config = {"frozen": True, "extra": "forbid"}

    maker: Decimal = Field(default=Decimal("0.002"), ge=Decimal("0"), le=Decimal("1"))
    taker: Decimal = Field(default=Decimal("0.002"), ge=Decimal("0"), le=Decimal("1"))


class TradingOptions(BaseModel):
    """Venue specific trading options."""

    model_config = {"frozen": True, "extra": "forbid"}

    create_market_buy_order_requires_price: bool = Field(
        default=True,
        description="Market buys must carry a reference price",
    )


class ExchangeConfig(BaseModel):
    """Configuration for the LCX venue."""

    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(default="lcx", min_length=1)
    urls: ApiUrls = Field(default_factory=ApiUrls)
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings)
    fees: TradingFees = Field(default_factory=TradingFees)
    options: TradingOptions = Field(default_factory=TradingOptions)
    common_currencies: Dict[str, str] = Field(
        default_factory=lambda: {
            "BTCBEAR": "BEAR",
            "BTCBULL": "BULL",
            "CBC": "CryptoBharatCoin",
            "UNI": "UNICORN Token",
        },
        description="Venue currency id -> unified code overrides",
    )


class CredentialsConfig(BaseModel):
    """API credentials for private endpoints."""

    model_config = {"frozen": True, "extra": "forbid"}

    api_key: Optional[str] = Field(default=None, description="API access key")
    secret: Optional[str] = Field(default=None, description="API secret")

    @property
    def is_complete(self) -> bool:
        """Check that both key and secret are present."""
        return bool(self.api_key) and bool(self.secret)

    def __repr__(self) -> str:
        """Never print the secret."""
        return f"CredentialsConfig(api_key={'***' if self.api_key else None}, secret={'***' if self.secret else None})"


# =============================================================================
# CACHE AND LOGGING
# =============================================================================


class CacheConfig(BaseModel):
    """Market cache configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    backend: CacheBackend = Field(default=CacheBackend.REDIS)
    markets_ttl_seconds: int = Field(
        default=3600,
        description="Lifetime of the cached market list",
        ge=1,
    )
    markets_key: str = Field(
        default="lcx|markets",
        description="Cache key of the market list",
        min_length=1,
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(default=LogFormat.JSON)
    level: LogLevel = Field(default=LogLevel.INFO)


class RedisConnectionConfig(BaseModel):
    """Redis connection configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL",
    )
    db: int = Field(
        default=0,
        description="Redis database number",
        ge=0,
    )
    max_connections: int = Field(
        default=10,
        description="Maximum connection pool size",
        ge=1,
    )
    socket_timeout: int = Field(
        default=5,
        description="Socket timeout in seconds",
        ge=1,
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only redis:// and rediss:// URLs are accepted."""
        if not v.startswith(("redis://", "rediss://")):
            raise ValueError(f"Redis URL must start with redis:// or rediss://, got {v}")
        return v


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class AppConfig(BaseModel):
    """
    Root application configuration.

    Example:
        >>> config = load_config("config")
        >>> config.cache.markets_ttl_seconds
        3600
    """

    model_config = {"frozen": True, "extra": "forbid"}

    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    redis: RedisConnectionConfig = Field(default_factory=RedisConnectionConfig)
