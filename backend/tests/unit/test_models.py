"""
Unit tests for price bars, signals and trades.
"""

import random
from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from backtester.exceptions import DataValidationError, InvalidParameterError, InvalidTradeError
from backtester.models.market_data import PriceBar, to_decimal, validate_series
from backtester.models.signal import TradeAction, TradeSignal
from backtester.models.trade import Trade


DAY = date(2024, 1, 2)


# ============================================================================
# PriceBar Tests
# ============================================================================

class TestPriceBar:
    """Tests for OHLC validation."""

    def test_valid_bar(self):
        bar = PriceBar(DAY, Decimal("185.50"), Decimal("188.20"), Decimal("184.30"), Decimal("187.45"))

        assert bar.open == Decimal("185.50")
        assert bar.range == Decimal("3.90")
        assert bar.change == Decimal("1.95")

    def test_high_below_low_rejected(self):
        with pytest.raises(DataValidationError, match="cannot be less than low"):
            PriceBar(DAY, Decimal("10"), Decimal("9"), Decimal("11"), Decimal("10"))

    def test_high_below_close_rejected(self):
        with pytest.raises(DataValidationError, match="must be >= open"):
            PriceBar(DAY, Decimal("10"), Decimal("11"), Decimal("9"), Decimal("12"))

    def test_low_above_open_rejected(self):
        with pytest.raises(DataValidationError, match="must be <= open"):
            PriceBar(DAY, Decimal("9"), Decimal("12"), Decimal("10"), Decimal("11"))

    def test_flat_bar_is_valid(self):
        bar = PriceBar(DAY, Decimal("10"), Decimal("10"), Decimal("10"), Decimal("10"))
        assert bar.range == 0

    def test_random_ohlc_either_valid_or_rejected(self):
        """Every bar either satisfies all OHLC rules or fails construction."""
        rng = random.Random(20240102)
        accepted = rejected = 0

        for _ in range(500):
            open_, high, low, close = (Decimal(rng.randint(1, 40)) for _ in range(4))
            valid = (
                high >= low
                and high >= open_ and high >= close
                and low <= open_ and low <= close
            )
            if valid:
                bar = PriceBar(DAY, open_, high, low, close)
                assert bar.low <= min(bar.open, bar.close)
                assert bar.high >= max(bar.open, bar.close)
                accepted += 1
            else:
                with pytest.raises(DataValidationError):
                    PriceBar(DAY, open_, high, low, close)
                rejected += 1

        assert accepted > 0
        assert rejected > 0

    def test_bar_is_immutable(self):
        bar = PriceBar(DAY, Decimal("10"), Decimal("11"), Decimal("9"), Decimal("10"))
        with pytest.raises(AttributeError):
            bar.close = Decimal("12")

    def test_floats_are_coerced_through_str(self):
        bar = PriceBar(DAY, 0.1, 0.3, 0.1, 0.2)
        assert bar.close == Decimal("0.2")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_percent_change_zero_open(self):
        bar = PriceBar(DAY, Decimal("0"), Decimal("1"), Decimal("0"), Decimal("1"))
        assert bar.percent_change == 0


class TestValidateSeries:
    """Tests for series ordering checks."""

    def test_empty_series_rejected(self):
        with pytest.raises(InvalidParameterError):
            validate_series([])

    def test_unordered_series_rejected(self, make_bars):
        bars = make_bars([10, 11, 12])
        with pytest.raises(DataValidationError, match="ascending"):
            validate_series([bars[1], bars[0], bars[2]])

    def test_equal_dates_allowed(self, make_bars):
        bars = make_bars([10, 11])
        same_day = [bars[0], replace(bars[1], date=bars[0].date)]

        assert validate_series(same_day) == tuple(same_day)

    def test_returns_tuple(self, make_bars):
        bars = make_bars([10, 11])
        assert validate_series(bars) == tuple(bars)


# ============================================================================
# Trade Tests
# ============================================================================

class TestTrade:
    """Tests for trade validation and signed cost."""

    def test_buy_total_cost_includes_commission(self):
        trade = Trade(DAY, TradeAction.BUY, Decimal("12"), 10, Decimal("5"))

        assert trade.gross_value == Decimal("120")
        assert trade.total_cost == Decimal("125")

    def test_sell_total_cost_is_negative_net_proceeds(self):
        trade = Trade(DAY, TradeAction.SELL, Decimal("12"), 10, Decimal("5"))

        assert trade.total_cost == Decimal("-115")

    @pytest.mark.parametrize("price", [Decimal("0"), Decimal("-1")])
    def test_non_positive_price_rejected(self, price):
        with pytest.raises(InvalidTradeError, match="Price"):
            Trade(DAY, TradeAction.BUY, price, 1)

    @pytest.mark.parametrize("shares", [0, -3])
    def test_non_positive_shares_rejected(self, shares):
        with pytest.raises(InvalidTradeError, match="Shares"):
            Trade(DAY, TradeAction.BUY, Decimal("10"), shares)

    def test_fractional_shares_rejected(self):
        with pytest.raises(InvalidTradeError):
            Trade(DAY, TradeAction.BUY, Decimal("10"), 1.5)

    def test_negative_commission_rejected(self):
        with pytest.raises(InvalidTradeError, match="Commission"):
            Trade(DAY, TradeAction.BUY, Decimal("10"), 1, Decimal("-0.01"))

    def test_str_format(self):
        trade = Trade(DAY, TradeAction.BUY, Decimal("12"), 10)
        assert str(trade) == "2024-01-02 BUY 10 shares at $12.00 = $120.00"

    def test_to_dict(self):
        trade = Trade(DAY, TradeAction.SELL, Decimal("12.5"), 2, Decimal("1"))
        data = trade.to_dict()

        assert data["action"] == "SELL"
        assert data["total_cost"] == "-24.0"
        assert data["date"] == "2024-01-02"


class TestTradeSignal:
    def test_signal_fields(self):
        signal = TradeSignal(DAY, TradeAction.BUY, Decimal("10"), "test")

        assert signal.to_dict() == {
            "date": "2024-01-02",
            "action": "BUY",
            "reference_price": "10",
            "rationale": "test",
        }
