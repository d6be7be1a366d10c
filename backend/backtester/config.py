"""
Application configuration for the backtester.

Provides:
- Environment-aware settings loaded from env vars and .env
- Default backtest parameters for the CLI and API
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    # Backtest defaults
    initial_cash: Decimal = Decimal("10000")
    commission_per_trade: Decimal = Decimal("5")
    short_period: int = 3
    long_period: int = 8
    data_path: str = "data/sample-data.csv"

    # Observability
    metrics_enabled: bool = True

    @field_validator("initial_cash")
    @classmethod
    def validate_initial_cash(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("initial_cash must be positive")
        return v

    @field_validator("commission_per_trade")
    @classmethod
    def validate_commission(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("commission_per_trade cannot be negative")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @model_validator(mode="after")
    def validate_periods(self) -> "Settings":
        if self.short_period <= 0 or self.long_period <= 0:
            raise ValueError("short_period and long_period must be positive")
        if self.short_period >= self.long_period:
            raise ValueError("short_period must be less than long_period")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.app_env in ("production", "prod")

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.app_env in ("development", "dev", "")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
