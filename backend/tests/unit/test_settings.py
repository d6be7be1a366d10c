"""
Tests for environment-driven settings.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from backtester.config import Settings, get_settings


class TestSettings:
    """Tests for Settings defaults and validators."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.initial_cash == Decimal("10000")
        assert settings.commission_per_trade == Decimal("5")
        assert settings.short_period == 3
        assert settings.long_period == 8
        assert settings.log_format == "text"
        assert settings.is_development is True
        assert settings.is_production is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("INITIAL_CASH", "2500.50")
        monkeypatch.setenv("SHORT_PERIOD", "5")
        monkeypatch.setenv("LONG_PERIOD", "20")
        monkeypatch.setenv("LOG_FORMAT", "JSON")
        monkeypatch.setenv("APP_ENV", "production")

        settings = Settings(_env_file=None)

        assert settings.initial_cash == Decimal("2500.50")
        assert (settings.short_period, settings.long_period) == (5, 20)
        assert settings.log_format == "json"
        assert settings.is_production is True

    @pytest.mark.parametrize("cash", ["0", "-100"])
    def test_initial_cash_must_be_positive(self, cash):
        with pytest.raises(ValidationError, match="initial_cash"):
            Settings(_env_file=None, initial_cash=Decimal(cash))

    def test_commission_cannot_be_negative(self):
        with pytest.raises(ValidationError, match="commission_per_trade"):
            Settings(_env_file=None, commission_per_trade=Decimal("-1"))

    def test_unknown_log_format(self):
        with pytest.raises(ValidationError, match="log_format"):
            Settings(_env_file=None, log_format="xml")

    @pytest.mark.parametrize("short_period, long_period", [(8, 3), (5, 5), (0, 5)])
    def test_invalid_periods(self, short_period, long_period):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, short_period=short_period, long_period=long_period)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
