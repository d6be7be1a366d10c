"""
Simple moving average over closing prices.

All functions are pure: they read the series and return new tuples, so the
same series can be averaged repeatedly with different periods.
"""

from datetime import date
from decimal import Decimal
from typing import Sequence

from backtester.exceptions import InvalidParameterError
from backtester.models.market_data import PriceBar


def _check_period(series: Sequence[PriceBar], period: int) -> None:
    if not series:
        raise InvalidParameterError("Price data cannot be null or empty")
    if period <= 0:
        raise InvalidParameterError("Period must be positive")
    if period > len(series):
        raise InvalidParameterError(
            f"Period ({period}) cannot be larger than data points ({len(series)})"
        )


def moving_average_values(series: Sequence[PriceBar], period: int) -> tuple[Decimal, ...]:
    """
    Calculate the simple moving average of closing prices.

    Args:
        series: Price bars sorted oldest to newest
        period: Number of bars in each trailing window

    Returns:
        One average per complete window, starting at the period-th bar

    Raises:
        InvalidParameterError: if period <= 0, the series is empty,
            or period exceeds the series length
    """
    _check_period(series, period)

    closes = [bar.close for bar in series]
    divisor = Decimal(period)

    return tuple(
        sum(closes[i - period + 1:i + 1], Decimal("0")) / divisor
        for i in range(period - 1, len(closes))
    )


def simple_moving_average(
    series: Sequence[PriceBar],
    period: int,
) -> tuple[tuple[date, Decimal], ...]:
    """
    Calculate the simple moving average paired with the date each window ends on.

    The result has ``len(series) - period + 1`` entries; the first is dated at
    the bar at index ``period - 1``.
    """
    averages = moving_average_values(series, period)
    return tuple(
        (series[i + period - 1].date, average)
        for i, average in enumerate(averages)
    )


def current_moving_average(series: Sequence[PriceBar], period: int) -> Decimal:
    """Most recent moving average value."""
    return moving_average_values(series, period)[-1]
