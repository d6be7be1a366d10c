"""
Backtest module for simulating trading strategies.
"""

from backtester.backtest.portfolio import Portfolio, PortfolioSnapshot
from backtester.backtest.engine import BacktestEngine, BacktestResult, run_backtest
from backtester.backtest.performance import (
    PerformanceMetrics,
    TradePair,
    calculate_metrics,
    pair_trades,
)
from backtester.backtest.comparison import ComparisonRow, compare_strategies

__all__ = [
    "Portfolio",
    "PortfolioSnapshot",
    "BacktestEngine",
    "BacktestResult",
    "run_backtest",
    "PerformanceMetrics",
    "TradePair",
    "calculate_metrics",
    "pair_trades",
    "ComparisonRow",
    "compare_strategies",
]
