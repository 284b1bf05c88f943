"""Process-wide settings for the signal pipeline, read from EDGE_* variables.

Covers the run mode (BACKTEST, DEV), log location, Twelve Data credentials
and request limits, and the default training seed.

Usage:
    >>> from src.edge_core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.logs_dir)
    >>> print(settings.environment)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.edge_core.config.constants import (
    DEFAULT_OUTPUT_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    TWELVE_DATA_BASE_URL,
)


class Environment(str, Enum):
    """Environment modes for the pipeline."""

    BACKTEST = "BACKTEST"  # Offline backtesting mode
    DEV = "DEV"  # Development mode


class Settings(BaseSettings):
    """Central settings for the signal pipeline.

    Settings can be overridden via environment variables (uppercase, with underscores).
    Example: EDGE_ENVIRONMENT=BACKTEST, EDGE_LOGS_DIR=/custom/path

    Attributes:
        environment: Current environment mode (BACKTEST, DEV)
        base_dir: Repository root directory (auto-detected)
        logs_dir: Directory for log files
        twelve_data_api_keys: API keys rotated round-robin by the market data client
        twelve_data_base_url: Base URL of the Twelve Data REST API
        market_data_output_size: Number of bars requested per fetch
        request_timeout_seconds: HTTP timeout for provider calls
        default_seed: Seed for model initialization (None = stochastic training)
    """

    environment: Environment = Field(
        default=Environment.DEV, description="Environment mode: BACKTEST or DEV"
    )

    # config/settings.py -> config -> edge_core -> src -> repo root
    base_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parents[3],
        description="Repository root directory",
    )

    logs_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parents[3] / "logs",
        description="Directory for log files",
    )

    twelve_data_api_keys: list[str] = Field(
        default_factory=list,
        description="Twelve Data API keys. Set via EDGE_TWELVE_DATA_API_KEYS "
        'as a JSON list, e.g. \'["key1", "key2"]\'.',
    )

    twelve_data_base_url: str = Field(
        default=TWELVE_DATA_BASE_URL, description="Twelve Data REST base URL"
    )

    market_data_output_size: int = Field(
        default=DEFAULT_OUTPUT_SIZE, ge=1, description="Bars requested per fetch"
    )

    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT, gt=0, description="HTTP timeout in seconds"
    )

    default_seed: int | None = Field(
        default=None,
        description="Seed for model initialization. None keeps production "
        "training stochastic; set an integer for reproducible runs.",
    )

    model_config = SettingsConfigDict(
        env_prefix="EDGE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("twelve_data_api_keys")
    @classmethod
    def strip_empty_keys(cls, v: list[str]) -> list[str]:
        """Drop blank entries so an empty env var means 'no keys'."""
        return [key.strip() for key in v if key and key.strip()]

    def model_post_init(self, __context) -> None:
        """Post-initialization: resolve paths."""
        self.base_dir = self.base_dir.resolve()
        self.logs_dir = self.logs_dir.resolve()


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton).

    Returns:
        Settings instance (cached after first call)
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
