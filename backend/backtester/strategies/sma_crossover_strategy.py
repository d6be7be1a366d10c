from typing import Any, Dict, Iterable, List, Sequence, Tuple
from datetime import date
from decimal import Decimal
import logging

from backtester.exceptions import IndicatorUnavailableError, InvalidParameterError
from backtester.indicators.moving_average import simple_moving_average
from backtester.models.market_data import PriceBar
from backtester.models.signal import TradeAction, TradeSignal
from backtester.strategies.base_strategy import BaseStrategy

logger = logging.getLogger(__name__)


class SMACrossoverStrategy(BaseStrategy):
    """
    Simple Moving Average Crossover.

    Logic:
    - BUY when the short SMA moves from at-or-below the long SMA to strictly above it
    - SELL when the short SMA moves from at-or-above the long SMA to strictly below it
    - Equality counts as "not crossed", so riding exactly on the line emits nothing

    Signals are priced at the close of the bar where the crossover completes.
    """

    def __init__(self, short_period: int = 5, long_period: int = 20):
        super().__init__({"short_period": short_period, "long_period": long_period})

    @property
    def short_period(self) -> int:
        return self.config["short_period"]

    @property
    def long_period(self) -> int:
        return self.config["long_period"]

    def get_name(self) -> str:
        return f"SMA Crossover ({self.short_period}/{self.long_period})"

    def get_description(self) -> str:
        return (
            f"Buy when {self.short_period}-day SMA crosses above {self.long_period}-day SMA, "
            f"sell when it crosses below"
        )

    def get_default_config(self) -> Dict[str, Any]:
        return {
            "short_period": 5,
            "long_period": 20,
        }

    def validate_config(self) -> None:
        short_period = self.config["short_period"]
        long_period = self.config["long_period"]

        for value in (short_period, long_period):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameterError(f"Periods must be integers, got {value!r}")
        if short_period <= 0 or long_period <= 0:
            raise InvalidParameterError("Periods must be positive")
        if short_period >= long_period:
            raise InvalidParameterError("Short period must be less than long period")

    def generate_signals(self, series: Sequence[PriceBar]) -> List[TradeSignal]:
        """Generate buy/sell signals at SMA crossovers."""
        short_sma = simple_moving_average(series, self.short_period)
        long_sma = simple_moving_average(series, self.long_period)

        # Long averages start later, so their dates are the comparable set.
        # A repeated date resolves to its first bar.
        short_by_date = self._first_by_date(short_sma)
        long_points = list(self._first_by_date(long_sma).items())
        close_by_date = self._first_by_date((bar.date, bar.close) for bar in series)

        signals: List[TradeSignal] = []

        for (previous_date, previous_long), (current_date, current_long) in zip(long_points, long_points[1:]):
            previous_short = self._short_for_date(short_by_date, previous_date)
            current_short = self._short_for_date(short_by_date, current_date)

            if previous_short <= previous_long and current_short > current_long:
                signals.append(TradeSignal(
                    date=current_date,
                    action=TradeAction.BUY,
                    reference_price=close_by_date[current_date],
                    rationale=(
                        f"Bullish crossover: {self.short_period}-day SMA ({current_short:.2f}) "
                        f"> {self.long_period}-day SMA ({current_long:.2f})"
                    ),
                ))
            elif previous_short >= previous_long and current_short < current_long:
                signals.append(TradeSignal(
                    date=current_date,
                    action=TradeAction.SELL,
                    reference_price=close_by_date[current_date],
                    rationale=(
                        f"Bearish crossover: {self.short_period}-day SMA ({current_short:.2f}) "
                        f"< {self.long_period}-day SMA ({current_long:.2f})"
                    ),
                ))

        logger.debug(f"{self.name}: {len(signals)} crossovers over {len(series)} bars")
        return signals

    @staticmethod
    def _first_by_date(points: Iterable[Tuple[date, Decimal]]) -> Dict[date, Decimal]:
        by_date: Dict[date, Decimal] = {}
        for day, value in points:
            by_date.setdefault(day, value)
        return by_date

    @staticmethod
    def _short_for_date(short_by_date: Dict[date, Decimal], day: date) -> Decimal:
        try:
            return short_by_date[day]
        except KeyError:
            raise IndicatorUnavailableError(
                f"No SMA data found for date {day:%Y-%m-%d}"
            ) from None
