"""
Side-by-side comparison of several strategies over one price series.

Each strategy gets its own engine and portfolio; only the read-only series
is shared.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence
import logging

from backtester.backtest.engine import BacktestEngine
from backtester.backtest.performance import PerformanceMetrics, calculate_metrics
from backtester.models.market_data import PriceBar
from backtester.strategies.base_strategy import BaseStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonRow:
    """Headline numbers for one strategy."""
    strategy_name: str
    total_return: Decimal
    max_drawdown: Decimal
    win_rate: Decimal
    profit_factor: Decimal
    total_trades: int

    @classmethod
    def from_metrics(cls, strategy_name: str, metrics: PerformanceMetrics) -> "ComparisonRow":
        return cls(
            strategy_name=strategy_name,
            total_return=metrics.total_return,
            max_drawdown=metrics.max_drawdown,
            win_rate=metrics.win_rate,
            profit_factor=metrics.profit_factor,
            total_trades=metrics.total_trades,
        )

    def to_dict(self) -> dict:
        return {
            "strategy_name": self.strategy_name,
            "total_return": str(self.total_return),
            "max_drawdown": str(self.max_drawdown),
            "win_rate": str(self.win_rate),
            "profit_factor": str(self.profit_factor),
            "total_trades": self.total_trades,
        }


def compare_strategies(
    strategies: Iterable[BaseStrategy],
    series: Sequence[PriceBar],
    initial_cash,
    commission_per_trade=Decimal("0"),
) -> list[ComparisonRow]:
    """
    Backtest each strategy over the same series.

    Returns:
        One row per strategy, best total return first
    """
    rows = []
    for strategy in strategies:
        engine = BacktestEngine(strategy, initial_cash, commission_per_trade)
        result = engine.run(series)
        rows.append(ComparisonRow.from_metrics(result.strategy_name, calculate_metrics(result)))

    rows.sort(key=lambda row: row.total_return, reverse=True)
    logger.info(f"Compared {len(rows)} strategies")
    return rows


def format_comparison(rows: Sequence[ComparisonRow]) -> str:
    """Render comparison rows as a fixed-width table."""
    header = f"{'Strategy':<28}{'Return':>10}{'Max DD':>10}{'Win Rate':>10}{'PF':>9}{'Trades':>8}"
    lines = ["STRATEGY COMPARISON", "=" * len(header), header, "-" * len(header)]
    for row in rows:
        lines.append(
            f"{row.strategy_name:<28}"
            f"{row.total_return:>9.2f}%"
            f"{row.max_drawdown:>9.2f}%"
            f"{row.win_rate:>9.1f}%"
            f"{row.profit_factor:>9.2f}"
            f"{row.total_trades:>8}"
        )
    return "\n".join(lines)
