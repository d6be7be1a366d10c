"""
Backtest engine for running strategy simulations.

Replays a daily price series through a strategy and a fresh Portfolio.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence
import logging
import time

from backtester.backtest.portfolio import Portfolio, PortfolioSnapshot
from backtester.exceptions import InvalidParameterError
from backtester.models.market_data import PriceBar, to_decimal, validate_series
from backtester.models.signal import TradeAction, TradeSignal
from backtester.models.trade import Trade
from backtester.observability.metrics import (
    record_backtest,
    record_signal,
    record_skip,
    record_trade,
)
from backtester.strategies.base_strategy import BaseStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BacktestResult:
    """
    Complete, immutable outcome of one backtest run.

    This is the only state that survives a run; the Portfolio used to
    produce it is discarded.
    """
    strategy_name: str
    initial_value: Decimal
    final_value: Decimal
    trades: tuple[Trade, ...]
    equity_curve: tuple[PortfolioSnapshot, ...]
    start_date: date
    end_date: date

    @property
    def total_return(self) -> Decimal:
        """Return as a percentage of initial value."""
        if self.initial_value == 0:
            return Decimal("0")
        return (self.final_value - self.initial_value) / self.initial_value * 100

    @property
    def trade_count(self) -> int:
        return len(self.trades)

    @property
    def total_commissions(self) -> Decimal:
        return sum((t.commission for t in self.trades), Decimal("0"))

    def to_dict(self) -> dict:
        """Convert result to dictionary for API response."""
        return {
            "strategy_name": self.strategy_name,
            "initial_value": str(self.initial_value),
            "final_value": str(self.final_value),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "trades": [t.to_dict() for t in self.trades],
            "equity_curve": [s.to_dict() for s in self.equity_curve],
        }


class BacktestEngine:
    """
    Engine for running backtests on historical data.

    The engine:
    1. Asks the strategy once for every signal over the full series
    2. Iterates bars chronologically
    3. Applies each signal dated on the bar, in emission order, once per date
    4. Snapshots portfolio value at the bar's close

    Buys spend all available cash (after commission) on whole shares; sells
    liquidate the entire position. A signal that cannot be acted on is
    skipped, not treated as an error.

    Example:
        engine = BacktestEngine(SMACrossoverStrategy(3, 8), initial_cash=10000, commission_per_trade=5)
        result = engine.run(bars)
    """

    def __init__(self, strategy: BaseStrategy, initial_cash, commission_per_trade=Decimal("0")):
        """
        Initialize the backtest engine.

        Args:
            strategy: Signal generator for the run
            initial_cash: Starting cash, must be positive
            commission_per_trade: Flat fee charged on every trade, must not be negative
        """
        if strategy is None:
            raise InvalidParameterError("Strategy is required")

        initial_cash = to_decimal(initial_cash)
        commission_per_trade = to_decimal(commission_per_trade)

        if initial_cash <= 0:
            raise InvalidParameterError("Initial cash must be positive")
        if commission_per_trade < 0:
            raise InvalidParameterError("Commission cannot be negative")

        self.strategy = strategy
        self.initial_cash = initial_cash
        self.commission_per_trade = commission_per_trade

    def run(self, series: Sequence[PriceBar]) -> BacktestResult:
        """
        Run the backtest over a price series.

        Args:
            series: Daily bars sorted oldest to newest

        Returns:
            BacktestResult with trades, equity curve and value bounds

        Raises:
            InvalidParameterError: empty series
            DataValidationError: series not in ascending date order
        """
        bars = validate_series(series)
        start_time = time.perf_counter()

        logger.info(
            f"Starting backtest: {self.strategy.name} over {len(bars)} bars "
            f"from {bars[0].date:%Y-%m-%d} to {bars[-1].date:%Y-%m-%d}",
            extra={"strategy": self.strategy.name, "bars": len(bars)},
        )

        try:
            signals = self.strategy.generate_signals(bars)
        except Exception:
            record_backtest("error", time.perf_counter() - start_time)
            raise

        logger.info(f"Generated {len(signals)} trading signals")
        signals_by_date = self._group_signals(signals)

        portfolio = Portfolio(self.initial_cash)
        equity_curve: list[PortfolioSnapshot] = []

        for bar in bars:
            # Signals for a repeated date apply once, at its first bar
            for signal in signals_by_date.pop(bar.date, ()):
                self._execute_signal(portfolio, signal)

            equity_curve.append(portfolio.snapshot(bar.date, bar.close))

        result = BacktestResult(
            strategy_name=self.strategy.name,
            initial_value=self.initial_cash,
            final_value=portfolio.total_value(bars[-1].close),
            trades=portfolio.trade_history,
            equity_curve=tuple(equity_curve),
            start_date=bars[0].date,
            end_date=bars[-1].date,
        )

        record_backtest("success", time.perf_counter() - start_time)
        logger.info(
            f"Backtest completed: {result.trade_count} trades, "
            f"final value {result.final_value:.2f} ({result.total_return:.2f}%)",
            extra={"strategy": self.strategy.name, "trades": result.trade_count},
        )
        return result

    def _group_signals(self, signals: Sequence[TradeSignal]) -> dict[date, list[TradeSignal]]:
        """Index signals by date, keeping emission order within a date."""
        signals_by_date: dict[date, list[TradeSignal]] = defaultdict(list)
        for signal in signals:
            record_signal(self.strategy.name, signal.action.value)
            signals_by_date[signal.date].append(signal)
        return signals_by_date

    def _execute_signal(self, portfolio: Portfolio, signal: TradeSignal) -> None:
        # A zero close is a valid bar but cannot price a trade
        if signal.reference_price <= 0:
            logger.debug(
                f"Skipping {signal.action.value} on {signal.date:%Y-%m-%d}: "
                f"non-positive price {signal.reference_price}"
            )
            record_skip("invalid_price")
            return

        if signal.action == TradeAction.BUY:
            self._handle_buy_signal(portfolio, signal)
        else:
            self._handle_sell_signal(portfolio, signal)

    def _handle_buy_signal(self, portfolio: Portfolio, signal: TradeSignal) -> None:
        """Buy as many whole shares as cash allows after commission."""
        available_cash = portfolio.cash - self.commission_per_trade
        shares_to_buy = int(available_cash // signal.reference_price)

        if shares_to_buy <= 0:
            logger.debug(
                f"Skipping BUY on {signal.date:%Y-%m-%d}: "
                f"cash {portfolio.cash:.2f} cannot cover one share at {signal.reference_price:.2f}"
            )
            record_skip("insufficient_cash")
            return

        trade = Trade(
            date=signal.date,
            action=TradeAction.BUY,
            price_per_share=signal.reference_price,
            share_count=shares_to_buy,
            commission=self.commission_per_trade,
        )
        self._apply(portfolio, trade)

    def _handle_sell_signal(self, portfolio: Portfolio, signal: TradeSignal) -> None:
        """Sell the entire position, if there is one."""
        if portfolio.shares_owned <= 0:
            logger.debug(f"Skipping SELL on {signal.date:%Y-%m-%d}: no shares owned")
            record_skip("no_position")
            return

        trade = Trade(
            date=signal.date,
            action=TradeAction.SELL,
            price_per_share=signal.reference_price,
            share_count=portfolio.shares_owned,
            commission=self.commission_per_trade,
        )
        self._apply(portfolio, trade)

    @staticmethod
    def _apply(portfolio: Portfolio, trade: Trade) -> None:
        if portfolio.execute_trade(trade):
            logger.info(f"Executed {trade}")
            record_trade(trade.action.value)
        else:
            record_skip("rejected")


def run_backtest(
    strategy: BaseStrategy,
    series: Sequence[PriceBar],
    initial_cash=Decimal("10000"),
    commission_per_trade=Decimal("0"),
) -> BacktestResult:
    """
    Convenience function to run a single backtest.

    Args:
        strategy: Strategy instance
        series: Daily bars sorted oldest to newest
        initial_cash: Starting capital
        commission_per_trade: Flat fee per trade

    Returns:
        BacktestResult for the run
    """
    engine = BacktestEngine(strategy, initial_cash, commission_per_trade)
    return engine.run(series)
