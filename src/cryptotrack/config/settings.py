# src/cryptotrack/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables (or a .env file) and are validated
on load.

Files that USE this module:
- cryptotrack.app (loads settings for logging, feeds and intervals)
- cryptotrack.adapters.api.client (base URL and HTTP timeout)
- cryptotrack.application.tracker_service (feed intervals)

Files that this module USES:
- cryptotrack.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from typing import List, Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from cryptotrack.shared.validators import (
    parse_symbol_list,  # Split comma-separated symbols
    validate_base_url,  # Validate API base URL format
    validate_log_level,  # Validate logging level names
    validate_symbol,  # Validate instrument symbol format
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Pricing API ---
    api_base_url: str = Field(default="http://localhost:8080/api", alias="API_URL")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Feed intervals (in seconds) ---
    indices_interval_seconds: float = Field(default=90.0, alias="INDICES_INTERVAL_SECONDS", gt=0, le=86400)
    limits_interval_seconds: float = Field(default=30.0, alias="LIMITS_INTERVAL_SECONDS", gt=0, le=86400)
    history_interval_seconds: float = Field(default=300.0, alias="HISTORY_INTERVAL_SECONDS", gt=0, le=86400)
    health_interval_seconds: float = Field(default=60.0, alias="HEALTH_INTERVAL_SECONDS", gt=0, le=86400)

    # --- Tracked history (comma separated, either symbol form) ---
    history_symbols: str = Field(default="BTC/USD", alias="HISTORY_SYMBOLS")

    # --- Logging (for server deployment) ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="CRYPTOTRACK_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def history_symbol_list(self) -> List[str]:
        """Configured history symbols as a list."""
        return parse_symbol_list(self.history_symbols)

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate base URL format and drop a trailing slash."""
        if not validate_base_url(v):
            raise ValueError("API_URL must be an absolute http(s) URL")
        return v.rstrip("/")

    @field_validator("history_symbols")
    @classmethod
    def validate_history_symbols(cls, v: str) -> str:
        """Validate every configured symbol."""
        for symbol in parse_symbol_list(v):
            if not validate_symbol(symbol):
                raise ValueError(f"Invalid symbol in HISTORY_SYMBOLS: {symbol!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level name."""
        if not validate_log_level(v):
            raise ValueError("LOG_LEVEL must be a logging level name such as INFO or DEBUG")
        return v.upper()


# Global settings instance
settings = Settings()


# ============================================================================
# Running
# ============================================================================
#
# 1. Point the client at the backend and start the console runner:
#    API_URL=http://localhost:8080/api cryptotrack
#
# 2. Run it in the background with a rotating log file:
#    LOG_DIR=./logs CRYPTOTRACK_LOG_STDOUT=false nohup cryptotrack &
#
# 3. Follow the log:
#    tail -f logs/cryptotrack.log
#
# ============================================================================
