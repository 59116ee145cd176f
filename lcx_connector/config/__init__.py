"""
Configuration management.

Configuration is loaded from ``config/lcx.yaml`` and validated with Pydantic
models so errors surface at startup rather than on the first request.

Environment variables override the file:
    - LCX_API_KEY / LCX_SECRET: API credentials
    - REDIS_URL: Redis connection URL
    - LOG_LEVEL: Application log level

Example:
    >>> from lcx_connector.config import load_config
    >>> config = load_config()
    >>> config.cache.markets_ttl_seconds
    3600
"""

from lcx_connector.config.loader import ConfigLoadError, ConfigLoader, load_config
from lcx_connector.config.models import (
    # Enums
    CacheBackend,
    LogFormat,
    LogLevel,
    # Exchange config
    ApiUrls,
    ConnectionSettings,
    CredentialsConfig,
    ExchangeConfig,
    TradingFees,
    TradingOptions,
    # Infrastructure config
    CacheConfig,
    LoggingConfig,
    RedisConnectionConfig,
    # Root config
    AppConfig,
)

__all__: list[str] = [
    # Loader
    "load_config",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "CacheBackend",
    "LogFormat",
    "LogLevel",
    # Exchange config
    "ApiUrls",
    "ConnectionSettings",
    "CredentialsConfig",
    "ExchangeConfig",
    "TradingFees",
    "TradingOptions",
    # Infrastructure config
    "CacheConfig",
    "LoggingConfig",
    "RedisConnectionConfig",
    # Root config
    "AppConfig",
]
