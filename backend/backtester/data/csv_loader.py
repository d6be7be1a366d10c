"""
Load daily OHLC bars from CSV.

Expected format: ``Date,Open,High,Low,Close`` with a header row, e.g.
``2024-01-02,185.50,188.20,184.30,187.45``.

Malformed rows and blank lines are skipped with a warning naming their file
line. The file fails only when nothing usable is left.
"""

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Sequence, Union
import logging

import pandas as pd

from backtester.exceptions import DataValidationError, PriceDataError
from backtester.models.market_data import PriceBar

logger = logging.getLogger(__name__)

EXPECTED_COLUMNS = ("Date", "Open", "High", "Low", "Close")


def _blank_bad_line(fields: list[str]) -> list[str]:
    """Replace an over-long row with an empty one; it stays at its file line and fails parsing."""
    return [""] * len(EXPECTED_COLUMNS)


def _parse_row(row: Sequence, line_number: int) -> PriceBar:
    """Parse one CSV row into a validated PriceBar."""
    if len(row) != len(EXPECTED_COLUMNS) or any(not isinstance(v, str) or not v.strip() for v in row):
        raise PriceDataError(
            f"Line {line_number}: expected {len(EXPECTED_COLUMNS)} fields "
            f"({','.join(EXPECTED_COLUMNS)})"
        )

    date_text, *price_texts = (v.strip() for v in row)
    try:
        timestamp = pd.Timestamp(date_text)
        open_, high, low, close = (Decimal(text) for text in price_texts)
    except (ValueError, InvalidOperation) as e:
        raise PriceDataError(f"Line {line_number}: unable to parse field - {e}") from e

    if pd.isna(timestamp):
        raise PriceDataError(f"Line {line_number}: missing date")
    if not all(price.is_finite() for price in (open_, high, low, close)):
        raise PriceDataError(f"Line {line_number}: prices must be finite numbers")
    day = timestamp.date()

    try:
        return PriceBar(date=day, open=open_, high=high, low=low, close=close)
    except DataValidationError as e:
        raise PriceDataError(f"Line {line_number}: invalid price data - {e}") from e


def load_prices(path: Union[str, Path]) -> list[PriceBar]:
    """
    Load and validate price bars from a CSV file.

    Args:
        path: CSV file path

    Returns:
        Bars sorted ascending by date

    Raises:
        FileNotFoundError: the file does not exist
        PriceDataError: no data rows, or no row survived validation
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"CSV file not found: {path}")

    try:
        frame = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            engine="python",
            skip_blank_lines=False,
            on_bad_lines=_blank_bad_line,
        )
    except pd.errors.EmptyDataError as e:
        raise PriceDataError("CSV file must contain header row and at least one data row") from e
    except pd.errors.ParserError as e:
        raise PriceDataError(f"Error loading CSV file: {e}") from e

    if frame.empty:
        raise PriceDataError("CSV file must contain header row and at least one data row")
    if len(frame.columns) != len(EXPECTED_COLUMNS):
        raise PriceDataError(
            f"Expected {len(EXPECTED_COLUMNS)} columns ({','.join(EXPECTED_COLUMNS)}), "
            f"got {len(frame.columns)}"
        )

    bars = []
    # Header is line 1 and every later file line maps to exactly one frame row
    for line_number, row in enumerate(frame.itertuples(index=False, name=None), start=2):
        try:
            bars.append(_parse_row(row, line_number))
        except PriceDataError as e:
            logger.warning(f"Skipping line {line_number} due to error: {e}")

    if not bars:
        raise PriceDataError("No valid price data found in CSV file")

    bars.sort(key=lambda bar: bar.date)
    logger.info(f"Successfully loaded {len(bars)} price records from {path}")
    return bars


def price_range(series: Sequence[PriceBar]) -> tuple[Decimal, Decimal]:
    """Lowest low and highest high across a series."""
    if not series:
        raise PriceDataError("Price data cannot be empty")
    return min(bar.low for bar in series), max(bar.high for bar in series)
