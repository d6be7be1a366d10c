"""
Human-readable rendering of backtest results.

Formatting lives here so the core records stay plain data.
"""

from decimal import Decimal

from backtester.backtest.engine import BacktestResult
from backtester.backtest.performance import PerformanceMetrics
from backtester.models.signal import TradeAction


def _money(value: Decimal) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def assess_performance(metrics: PerformanceMetrics) -> list[str]:
    """Short verdicts on return and win rate."""
    if metrics.total_return > 10:
        verdicts = ["Excellent performance!"]
    elif metrics.total_return > 5:
        verdicts = ["Good performance!"]
    elif metrics.total_return > 0:
        verdicts = ["Modest gains"]
    else:
        verdicts = ["Strategy lost money"]

    if metrics.win_rate > 60:
        verdicts.append("High win rate")
    elif metrics.win_rate > 50:
        verdicts.append("Moderate win rate")
    else:
        verdicts.append("Low win rate")

    return verdicts


def format_summary(metrics: PerformanceMetrics, strategy_name: str) -> str:
    """Generate a human-readable summary of performance."""
    lines = [
        "=" * 50,
        "BACKTEST RESULTS",
        "=" * 50,
        f"Strategy: {strategy_name}",
        f"Period: {metrics.start_date:%Y-%m-%d} to {metrics.end_date:%Y-%m-%d} "
        f"({metrics.trading_days} days)",
        "",
        "Financial Performance:",
        f"  Initial Value:     {_money(metrics.initial_value)}",
        f"  Final Value:       {_money(metrics.final_value)}",
        f"  Total Profit:      {_money(metrics.total_profit)}",
        f"  Total Return:      {metrics.total_return:.2f}%",
        "",
        "Trading Statistics:",
        f"  Total Trades:      {metrics.total_trades}",
        f"  Winning Trades:    {metrics.winning_trades}",
        f"  Losing Trades:     {metrics.losing_trades}",
        f"  Win Rate:          {metrics.win_rate:.1f}%",
        f"  Average Win:       {_money(metrics.average_win)}",
        f"  Average Loss:      {_money(metrics.average_loss)}",
        f"  Profit Factor:     {metrics.profit_factor:.2f}",
        "",
        "Risk Metrics:",
        f"  Max Drawdown:      {metrics.max_drawdown:.2f}%",
        f"  Total Commissions: {_money(metrics.total_commissions)}",
        "",
        "Assessment:",
    ]
    lines.extend(f"  {verdict}" for verdict in assess_performance(metrics))
    lines.append("=" * 50)
    return "\n".join(lines)


def format_trade_history(result: BacktestResult) -> str:
    """List every executed trade, oldest first."""
    lines = ["TRADE HISTORY", "=" * 50]

    if not result.trades:
        lines.append("  No trades were executed.")
        return "\n".join(lines)

    for trade in result.trades:
        marker = "+" if trade.action == TradeAction.BUY else "-"
        lines.append(f"  {marker} {trade}")

    return "\n".join(lines)
