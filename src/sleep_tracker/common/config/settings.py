"""Configuration management - Centralized configuration for the sleep tracker.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks.
"""

import os
import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from sleep_tracker.common.constants import StatsConstants
from sleep_tracker.common.exceptions import ConfigurationError


ENV_PREFIX = "SLEEP_TRACKER_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: str = "false") -> bool:
    return _env(name, default).lower() == "true"


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _parse_environment() -> Environment:
    value = _env("ENVIRONMENT", "development")
    try:
        return Environment(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown environment: {value}", details={"environment": value}
        ) from exc


def _parse_log_level() -> LogLevel:
    value = _env("LOG_LEVEL", "INFO").upper()
    try:
        return LogLevel(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Unknown log level: {value}", details={"log_level": value}
        ) from exc


def _parse_int(name: str, default: str) -> int:
    value = _env(name, default)
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be an integer", details={name.lower(): value}
        ) from exc


def _parse_cors_origins() -> List[str]:
    origins = _env("CORS_ORIGINS", "")
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


@dataclass
class Config:
    """Central configuration object for the sleep tracker.

    All settings can be overridden via environment variables prefixed with
    SLEEP_TRACKER_.

    Example:
        SLEEP_TRACKER_ENVIRONMENT=production
        SLEEP_TRACKER_DATABASE_URL=postgresql+psycopg://sleep@db/sleep
        SLEEP_TRACKER_DEFAULT_DAYS_BACK=14
    """

    # Core settings
    environment: Environment = field(default_factory=_parse_environment)
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG"))
    log_level: LogLevel = field(default_factory=_parse_log_level)

    # API settings
    api_host: str = field(default_factory=lambda: _env("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: _parse_int("API_PORT", "8000"))
    cors_origins: List[str] = field(default_factory=_parse_cors_origins)
    enable_docs: Optional[bool] = field(
        default_factory=lambda: (
            _env_bool("ENABLE_DOCS") if os.getenv(f"{ENV_PREFIX}ENABLE_DOCS") else None
        )
    )

    # Database settings
    database_url: str = field(
        default_factory=lambda: _env("DATABASE_URL", "sqlite:///./sleep_tracker.db")
    )
    database_echo: bool = field(default_factory=lambda: _env_bool("DATABASE_ECHO"))

    # Statistics settings
    default_days_back: int = field(
        default_factory=lambda: _parse_int(
            "DEFAULT_DAYS_BACK", str(StatsConstants.DEFAULT_DAYS_BACK)
        )
    )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.database_url:
            raise ConfigurationError("SLEEP_TRACKER_DATABASE_URL must not be empty")

        if not 0 < self.api_port < 65536:
            raise ConfigurationError(
                "SLEEP_TRACKER_API_PORT must be between 1 and 65535",
                details={"api_port": self.api_port},
            )

        if self.default_days_back < 1:
            raise ConfigurationError(
                "SLEEP_TRACKER_DEFAULT_DAYS_BACK must be positive",
                details={"default_days_back": self.default_days_back},
            )

        if self.enable_docs is None:
            self.enable_docs = not self.is_production

        # Warn about debug in production
        if self.is_production and self.debug:
            warnings.warn(
                "Debug mode is enabled in production environment",
                RuntimeWarning,
                stacklevel=2
            )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
