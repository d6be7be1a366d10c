"""
Unit tests for the simple moving average indicator.
"""

from datetime import date
from decimal import Decimal

import pytest

from backtester.exceptions import InvalidParameterError
from backtester.indicators.moving_average import (
    current_moving_average,
    moving_average_values,
    simple_moving_average,
)


class TestSimpleMovingAverage:
    """Tests for simple_moving_average."""

    @pytest.mark.parametrize("period", [1, 2, 3, 5, 7])
    def test_output_length(self, make_bars, period):
        bars = make_bars([10, 11, 12, 13, 14, 15, 16])

        sma = simple_moving_average(bars, period)

        assert len(sma) == len(bars) - period + 1

    def test_values_are_window_means(self, make_bars):
        closes = [Decimal(c) for c in ("10", "11.5", "9", "14", "13.25", "12")]
        bars = make_bars(closes)
        period = 3

        sma = simple_moving_average(bars, period)

        for offset, (day, average) in enumerate(sma):
            window = closes[offset:offset + period]
            assert day == bars[offset + period - 1].date
            assert average == sum(window, Decimal("0")) / period

    def test_first_average_dated_at_period_th_bar(self, make_bars):
        bars = make_bars([1, 2, 3, 4], start=date(2024, 3, 1))

        sma = simple_moving_average(bars, 2)

        assert sma[0] == (date(2024, 3, 2), Decimal("1.5"))
        assert sma[-1] == (date(2024, 3, 4), Decimal("3.5"))

    def test_period_equal_to_length(self, make_bars):
        bars = make_bars([2, 4, 6])

        assert moving_average_values(bars, 3) == (Decimal("4"),)

    def test_period_larger_than_series(self, make_bars):
        with pytest.raises(InvalidParameterError, match="cannot be larger"):
            simple_moving_average(make_bars([1, 2]), 3)

    @pytest.mark.parametrize("period", [0, -1])
    def test_non_positive_period(self, make_bars, period):
        with pytest.raises(InvalidParameterError, match="positive"):
            simple_moving_average(make_bars([1, 2, 3]), period)

    def test_empty_series(self):
        with pytest.raises(InvalidParameterError, match="empty"):
            simple_moving_average([], 1)

    def test_repeated_calls_do_not_interfere(self, make_bars):
        bars = make_bars([5, 6, 7, 8, 9])

        first = simple_moving_average(bars, 2)
        simple_moving_average(bars, 4)
        second = simple_moving_average(bars, 2)

        assert first == second

    def test_current_moving_average(self, make_bars):
        bars = make_bars([5, 6, 7, 8, 9])

        assert current_moving_average(bars, 2) == Decimal("8.5")
