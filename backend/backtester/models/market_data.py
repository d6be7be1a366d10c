"""
Daily price bars.

A price series is any ordered sequence of PriceBar, oldest first.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from backtester.exceptions import DataValidationError, InvalidParameterError


def to_decimal(value) -> Decimal:
    """
    Coerce a monetary value to Decimal.

    Floats go through their string form so 0.1 stays 0.1 instead of the
    nearest binary fraction.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class PriceBar:
    """One day's OHLC record. Validated on construction, immutable afterwards."""
    date: date
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal

    def __post_init__(self):
        for name in ("open", "high", "low", "close"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

        if self.high < self.low:
            raise DataValidationError(
                f"High price ({self.high}) cannot be less than low price ({self.low})"
            )
        if self.high < self.open or self.high < self.close:
            raise DataValidationError(
                f"High price ({self.high}) must be >= open ({self.open}) and close ({self.close})"
            )
        if self.low > self.open or self.low > self.close:
            raise DataValidationError(
                f"Low price ({self.low}) must be <= open ({self.open}) and close ({self.close})"
            )

    @property
    def range(self) -> Decimal:
        """Daily high-low range."""
        return self.high - self.low

    @property
    def change(self) -> Decimal:
        """Close minus open."""
        return self.close - self.open

    @property
    def percent_change(self) -> Decimal:
        """Daily change as a percentage of the open, 0 when the open is 0."""
        if self.open == 0:
            return Decimal("0")
        return self.change / self.open * 100

    def to_dict(self) -> dict:
        """Convert bar to dictionary for JSON serialization."""
        return {
            "date": self.date.isoformat(),
            "open": str(self.open),
            "high": str(self.high),
            "low": str(self.low),
            "close": str(self.close),
        }

    def __str__(self) -> str:
        return (
            f"{self.date:%Y-%m-%d}: O:${self.open:,.2f} H:${self.high:,.2f} "
            f"L:${self.low:,.2f} C:${self.close:,.2f}"
        )


def validate_series(bars: Sequence[PriceBar]) -> tuple[PriceBar, ...]:
    """
    Check that a price series is non-empty and in ascending date order.

    Args:
        bars: Candidate price series

    Returns:
        The bars as an immutable tuple

    Raises:
        InvalidParameterError: if the series is None or empty
        DataValidationError: if a bar is dated before its predecessor
    """
    if not bars:
        raise InvalidParameterError("Price data cannot be null or empty")

    series = tuple(bars)
    for previous, current in zip(series, series[1:]):
        if current.date < previous.date:
            raise DataValidationError(
                f"Price series is not in ascending date order: "
                f"{current.date:%Y-%m-%d} follows {previous.date:%Y-%m-%d}"
            )
    return series
