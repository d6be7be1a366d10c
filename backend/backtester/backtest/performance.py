"""
Performance metrics calculator for backtesting.

Calculates return, drawdown and round-trip trade statistics from a finished
BacktestResult. Every metric has a defined fallback for sparse data (no
trades, no closed pairs, no losses), so the record is always fully populated.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from backtester.backtest.engine import BacktestResult
from backtester.backtest.portfolio import PortfolioSnapshot
from backtester.models.signal import TradeAction
from backtester.models.trade import Trade

ZERO = Decimal("0")

# Reported when there are winning pairs but nothing to divide by
PROFIT_FACTOR_CAP = Decimal("999")


@dataclass(frozen=True)
class TradePair:
    """A buy matched with the sell that liquidated it."""
    buy: Trade
    sell: Trade
    profit: Decimal


def pair_trades(trades: Sequence[Trade]) -> list[TradePair]:
    """
    Match buys with the sells that close them.

    Scans trades by date holding at most one open buy. A buy replaces any
    open buy; a sell closes the open buy, or is ignored if there is none.
    A buy still open at the end is never paired.

    Profit is scaled by the buy's share count because a sell always
    liquidates the whole position opened by its buy.
    """
    pairs: list[TradePair] = []
    open_buy: Optional[Trade] = None

    # sorted() is stable, so same-day trades keep execution order
    for trade in sorted(trades, key=lambda t: t.date):
        if trade.action == TradeAction.BUY:
            open_buy = trade
        elif open_buy is not None:
            profit = (
                (trade.price_per_share - open_buy.price_per_share) * open_buy.share_count
                - open_buy.commission
                - trade.commission
            )
            pairs.append(TradePair(buy=open_buy, sell=trade, profit=profit))
            open_buy = None

    return pairs


@dataclass(frozen=True)
class PerformanceMetrics:
    """
    Read-only performance record for one backtest.

    Percentages (total_return, max_drawdown, win_rate) are on a 0-100 scale.
    Trade statistics are computed over buy/sell pairs; break-even pairs count
    as losing trades.
    """
    # Return metrics
    initial_value: Decimal
    final_value: Decimal
    total_return: Decimal
    total_profit: Decimal

    # Trade statistics
    total_trades: int
    total_commissions: Decimal
    winning_trades: int
    losing_trades: int
    win_rate: Decimal
    average_win: Decimal
    average_loss: Decimal
    profit_factor: Decimal

    # Time metrics
    trading_days: int
    start_date: date
    end_date: date

    # Risk metrics
    max_drawdown: Decimal

    @classmethod
    def from_result(cls, result: BacktestResult) -> "PerformanceMetrics":
        """
        Calculate all performance metrics from a backtest result.

        Args:
            result: The finished backtest; it is not modified

        Returns:
            PerformanceMetrics instance with all calculated values
        """
        pairs = pair_trades(result.trades)
        wins = [p.profit for p in pairs if p.profit > 0]
        losses = [p.profit for p in pairs if p.profit <= 0]

        return cls(
            initial_value=result.initial_value,
            final_value=result.final_value,
            total_return=cls._calculate_total_return(result.initial_value, result.final_value),
            total_profit=result.final_value - result.initial_value,
            total_trades=len(result.trades),
            total_commissions=sum((t.commission for t in result.trades), ZERO),
            winning_trades=len(wins),
            losing_trades=len(losses),
            win_rate=cls._calculate_win_rate(len(wins), len(pairs)),
            average_win=cls._mean(wins),
            average_loss=cls._mean(losses),
            profit_factor=cls._calculate_profit_factor(wins, losses),
            trading_days=(result.end_date - result.start_date).days,
            start_date=result.start_date,
            end_date=result.end_date,
            max_drawdown=cls._calculate_max_drawdown(result.equity_curve),
        )

    @staticmethod
    def _calculate_total_return(initial_value: Decimal, final_value: Decimal) -> Decimal:
        if initial_value == 0:
            return ZERO
        return (final_value - initial_value) / initial_value * 100

    @staticmethod
    def _calculate_max_drawdown(equity_curve: Sequence[PortfolioSnapshot]) -> Decimal:
        """
        Largest percentage fall from a running peak.

        The first snapshot seeds the peak. A peak of zero has nothing to
        fall from and contributes no drawdown.
        """
        if not equity_curve:
            return ZERO

        max_value = equity_curve[0].total_value
        max_drawdown = ZERO

        for snapshot in equity_curve:
            if snapshot.total_value > max_value:
                max_value = snapshot.total_value
            if max_value <= 0:
                continue

            current_drawdown = (max_value - snapshot.total_value) / max_value * 100
            if current_drawdown > max_drawdown:
                max_drawdown = current_drawdown

        return max_drawdown

    @staticmethod
    def _calculate_win_rate(winning: int, total_pairs: int) -> Decimal:
        if total_pairs == 0:
            return ZERO
        return Decimal(winning) / Decimal(total_pairs) * 100

    @staticmethod
    def _mean(values: Sequence[Decimal]) -> Decimal:
        if not values:
            return ZERO
        return sum(values, ZERO) / len(values)

    @staticmethod
    def _calculate_profit_factor(wins: Sequence[Decimal], losses: Sequence[Decimal]) -> Decimal:
        """
        Gross winning profit over gross losing magnitude.

        With no losses the ratio is undefined: report PROFIT_FACTOR_CAP when
        there were wins, 0 otherwise.
        """
        total_wins = sum(wins, ZERO)
        total_losses = abs(sum(losses, ZERO))

        if total_losses == 0:
            return PROFIT_FACTOR_CAP if total_wins > 0 else ZERO
        return total_wins / total_losses

    def to_dict(self) -> dict:
        """Convert metrics to dictionary for JSON serialization."""
        return {
            "initial_value": str(self.initial_value),
            "final_value": str(self.final_value),
            "total_return": str(self.total_return),
            "total_profit": str(self.total_profit),
            "total_trades": self.total_trades,
            "total_commissions": str(self.total_commissions),
            "winning_trades": self.winning_trades,
            "losing_trades": self.losing_trades,
            "win_rate": str(self.win_rate),
            "average_win": str(self.average_win),
            "average_loss": str(self.average_loss),
            "profit_factor": str(self.profit_factor),
            "trading_days": self.trading_days,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "max_drawdown": str(self.max_drawdown),
        }


def calculate_metrics(result: BacktestResult) -> PerformanceMetrics:
    """Calculate performance metrics for a backtest result."""
    return PerformanceMetrics.from_result(result)
