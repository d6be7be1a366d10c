"""Observability module for the backtester - logging and metrics."""

from backtester.observability.logging_config import setup_logging, get_logger
from backtester.observability.metrics import (
    setup_metrics,
    record_backtest,
    record_signal,
    record_trade,
    record_skip,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "record_backtest",
    "record_signal",
    "record_trade",
    "record_skip",
]
