"""
Tests for report rendering and strategy comparison.
"""

from decimal import Decimal

import pytest

from backtester.backtest.comparison import ComparisonRow, compare_strategies, format_comparison
from backtester.backtest.engine import BacktestEngine
from backtester.backtest.performance import calculate_metrics
from backtester.backtest.report import assess_performance, format_summary, format_trade_history
from backtester.strategies.buy_and_hold_strategy import BuyAndHoldStrategy
from backtester.strategies.sma_crossover_strategy import SMACrossoverStrategy


ROUND_TRIP = [10, 10, 10, 10, 12, 14, 16, 14, 12, 10, 10]


@pytest.fixture
def round_trip_result(make_bars):
    strategy = SMACrossoverStrategy(short_period=2, long_period=4)
    return BacktestEngine(strategy, Decimal("1000"), Decimal("5")).run(make_bars(ROUND_TRIP))


class TestReport:
    def test_summary_sections(self, round_trip_result):
        metrics = calculate_metrics(round_trip_result)

        text = format_summary(metrics, round_trip_result.strategy_name)

        assert "BACKTEST RESULTS" in text
        assert "Strategy: SMA Crossover (2/4)" in text
        assert "Initial Value:     $1,000.00" in text
        assert "Final Value:       $990.00" in text
        assert "Total Profit:      -$10.00" in text
        assert "Total Return:      -1.00%" in text
        assert "Total Commissions: $10.00" in text
        assert "Strategy lost money" in text

    def test_trade_history_lists_trades(self, round_trip_result):
        text = format_trade_history(round_trip_result)

        lines = text.splitlines()
        assert lines[0] == "TRADE HISTORY"
        assert lines[2] == "  + 2024-01-05 BUY 82 shares at $12.00 = $989.00"
        assert lines[3] == "  - 2024-01-09 SELL 82 shares at $12.00 = -$979.00"

    def test_trade_history_empty(self, make_bars):
        result = BacktestEngine(BuyAndHoldStrategy(), Decimal("5")).run(make_bars([10, 11]))

        assert "No trades were executed." in format_trade_history(result)

    @pytest.mark.parametrize("closes, expected", [
        ([10, 12], "Excellent performance!"),
        ([100, 107], "Good performance!"),
        ([100, 102], "Modest gains"),
        ([100, 90], "Strategy lost money"),
    ])
    def test_return_assessment(self, make_bars, closes, expected):
        result = BacktestEngine(BuyAndHoldStrategy(), Decimal("1000")).run(make_bars(closes))

        verdicts = assess_performance(calculate_metrics(result))

        assert verdicts[0] == expected
        # Open position never pairs, so win rate stays at zero
        assert verdicts[1] == "Low win rate"


class TestComparison:
    def test_rows_sorted_by_return(self, make_bars):
        bars = make_bars(ROUND_TRIP)

        rows = compare_strategies(
            [SMACrossoverStrategy(2, 4), BuyAndHoldStrategy()],
            bars,
            Decimal("1000"),
            Decimal("5"),
        )

        assert [row.strategy_name for row in rows] == ["Buy and Hold", "SMA Crossover (2/4)"]
        assert rows[0].total_return >= rows[1].total_return
        assert rows[1].total_trades == 2

    def test_each_strategy_gets_a_fresh_portfolio(self, make_bars):
        bars = make_bars(ROUND_TRIP)

        (alone,) = compare_strategies([BuyAndHoldStrategy()], bars, Decimal("1000"))
        rows = compare_strategies([SMACrossoverStrategy(2, 4), BuyAndHoldStrategy()], bars, Decimal("1000"))

        assert alone in rows

    def test_format_comparison(self):
        rows = [
            ComparisonRow("Buy and Hold", Decimal("12.5"), Decimal("3"), Decimal("0"), Decimal("0"), 1),
        ]

        text = format_comparison(rows)

        assert text.splitlines()[0] == "STRATEGY COMPARISON"
        assert "Buy and Hold" in text
        assert "12.50%" in text

    def test_row_to_dict(self):
        row = ComparisonRow("X", Decimal("1.5"), Decimal("0"), Decimal("50"), Decimal("999"), 4)

        assert row.to_dict()["profit_factor"] == "999"
        assert row.to_dict()["total_trades"] == 4
