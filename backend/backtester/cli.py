"""
Console entry point.

Loads a CSV, runs the configured SMA crossover, prints its results and
trade history, then compares it against a buy-and-hold baseline.
"""

import argparse
import sys
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence
import logging

from backtester.backtest.comparison import compare_strategies, format_comparison
from backtester.backtest.engine import BacktestEngine
from backtester.backtest.performance import calculate_metrics
from backtester.backtest.report import format_summary, format_trade_history
from backtester.config import get_settings
from backtester.data.csv_loader import load_prices, price_range
from backtester.exceptions import BacktestError
from backtester.observability.logging_config import setup_logging
from backtester.strategies.buy_and_hold_strategy import BuyAndHoldStrategy
from backtester.strategies.sma_crossover_strategy import SMACrossoverStrategy

logger = logging.getLogger(__name__)


def _decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="backtester",
        description="Backtest an SMA crossover strategy on daily CSV prices",
    )
    parser.add_argument("--data", default=settings.data_path, help="CSV file with Date,Open,High,Low,Close")
    parser.add_argument("--short", type=int, default=settings.short_period, help="Short SMA period")
    parser.add_argument("--long", type=int, default=settings.long_period, help="Long SMA period")
    parser.add_argument("--cash", type=_decimal, default=settings.initial_cash, help="Initial cash")
    parser.add_argument(
        "--commission", type=_decimal, default=settings.commission_per_trade, help="Commission per trade"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_format=settings.log_format, environment=settings.app_env)
    args = build_parser().parse_args(argv)

    try:
        prices = load_prices(args.data)
        low, high = price_range(prices)
        print(f"Loaded {len(prices)} bars: {prices[0].date:%Y-%m-%d} to {prices[-1].date:%Y-%m-%d}")
        print(f"Price range: ${low:,.2f} to ${high:,.2f}")
        print()

        strategy = SMACrossoverStrategy(short_period=args.short, long_period=args.long)
        print(f"Strategy: {strategy.name}")
        print(f"Logic: {strategy.description}")
        print(f"Initial cash: ${args.cash:,.2f}  Commission per trade: ${args.commission:,.2f}")
        print()

        engine = BacktestEngine(strategy, args.cash, args.commission)
        result = engine.run(prices)
        metrics = calculate_metrics(result)

        print(format_summary(metrics, result.strategy_name))
        print()
        print(format_trade_history(result))
        print()

        rows = compare_strategies(
            [SMACrossoverStrategy(args.short, args.long), BuyAndHoldStrategy()],
            prices,
            args.cash,
            args.commission,
        )
        print(format_comparison(rows))
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Make sure the CSV file exists or pass --data.", file=sys.stderr)
        return 1
    except BacktestError as e:
        logger.error(f"Backtest failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
