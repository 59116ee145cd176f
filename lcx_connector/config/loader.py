"""
Configuration loader for YAML-based application configuration.

Configuration file expected:
    - config/lcx.yaml: Venue URLs, connection, fees, cache and logging

Environment variables override:
    - LCX_API_KEY: API access key
    - LCX_SECRET: API secret
    - REDIS_URL: Redis connection URL
    - LOG_LEVEL: Application log level

Example:
    >>> from lcx_connector.config.loader import load_config
    >>> config = load_config("config")
    >>> config.exchange.connection.rate_limit_ms
    250
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from lcx_connector.config.models import (
    AppConfig,
    CacheConfig,
    CredentialsConfig,
    ExchangeConfig,
    LoggingConfig,
    LogLevel,
    RedisConnectionConfig,
)

CONFIG_FILENAME = "lcx.yaml"


class ConfigLoadError(Exception):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


class ConfigLoader:
    """
    Loads and validates application configuration from YAML.

    Expects the following directory structure:
        config/
        └── lcx.yaml    - Venue, cache and logging settings

    Example:
        >>> loader = ConfigLoader("config")
        >>> config = loader.load()
        >>> config.exchange.id
        'lcx'
    """

    def __init__(self, config_dir: Path | str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Path to configuration directory (default: 'config').

        Raises:
            ConfigLoadError: If config directory does not exist.
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise ConfigLoadError(
                f"Configuration directory not found: {self.config_dir}",
                file_path=self.config_dir,
            )
        if not self.config_dir.is_dir():
            raise ConfigLoadError(
                f"Configuration path is not a directory: {self.config_dir}",
                file_path=self.config_dir,
            )

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        Load a YAML file from the config directory.

        Args:
            filename: Name of YAML file (e.g., 'lcx.yaml').

        Returns:
            Dict containing parsed YAML content.

        Raises:
            ConfigLoadError: If file not found, empty, or invalid YAML.
        """
        file_path = self.config_dir / filename
        if not file_path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {file_path}",
                file_path=file_path,
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Invalid YAML syntax in {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Error reading {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e

        if data is None:
            raise ConfigLoadError(
                f"Configuration file is empty: {file_path}",
                file_path=file_path,
            )
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Configuration root must be a mapping: {file_path}",
                file_path=file_path,
            )
        return data

    def _load_credentials(self, data: Dict[str, Any]) -> CredentialsConfig:
        """
        Merge credentials from YAML with environment overrides.

        Environment variables:
            - LCX_API_KEY
            - LCX_SECRET
        """
        raw = data.get("credentials") or {}
        return CredentialsConfig(
            api_key=os.getenv("LCX_API_KEY", raw.get("api_key")),
            secret=os.getenv("LCX_SECRET", raw.get("secret")),
        )

    def _load_redis_connection(self, data: Dict[str, Any]) -> RedisConnectionConfig:
        """
        Load Redis connection configuration.

        Environment variables:
            - REDIS_URL: Redis connection URL (default: redis://localhost:6379)
        """
        raw = dict(data.get("redis") or {})
        redis_url = os.getenv("REDIS_URL")
        if redis_url:
            raw["url"] = redis_url
        return RedisConnectionConfig(**raw)

    def _load_logging(self, data: Dict[str, Any]) -> LoggingConfig:
        """
        Load logging configuration.

        Environment variables:
            - LOG_LEVEL: Log level (default: INFO). Unknown values are ignored.
        """
        raw = dict(data.get("logging") or {})
        level_str = os.getenv("LOG_LEVEL")
        if level_str:
            try:
                raw["level"] = LogLevel(level_str.upper())
            except ValueError:
                pass
        return LoggingConfig(**raw)

    def load(self) -> AppConfig:
        """
        Load and validate the configuration file.

        Returns:
            AppConfig: Validated application configuration.

        Raises:
            ConfigLoadError: If the configuration is invalid or missing.
        """
        file_path = self.config_dir / CONFIG_FILENAME
        data = self._load_yaml(CONFIG_FILENAME)

        try:
            return AppConfig(
                exchange=ExchangeConfig(**(data.get("exchange") or {})),
                credentials=self._load_credentials(data),
                cache=CacheConfig(**(data.get("cache") or {})),
                logging=self._load_logging(data),
                redis=self._load_redis_connection(data),
            )
        except ValidationError as e:
            raise ConfigLoadError(
                f"Configuration validation failed: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except TypeError as e:
            raise ConfigLoadError(
                f"Malformed configuration section: {e}",
                file_path=file_path,
                cause=e,
            ) from e


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """
    Convenience function to load application configuration.

    Args:
        config_dir: Path to configuration directory (default: 'config').

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigLoadError: If configuration loading fails.
    """
    loader = ConfigLoader(config_dir)
    return loader.load()
