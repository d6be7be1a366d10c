"""
Exception hierarchy for the backtester.

Every error raised by the core derives from BacktestError so callers can
catch the whole family at one seam (the API layer maps them to 400s).
Routine trading outcomes such as an unaffordable buy are not errors and
never raise.
"""


class BacktestError(Exception):
    """Base class for all backtester errors."""


class DataValidationError(BacktestError, ValueError):
    """A price bar violates the OHLC relationships or the series is out of order."""


class InvalidTradeError(BacktestError, ValueError):
    """A trade has a non-positive price or share count, or a negative commission."""


class InvalidParameterError(BacktestError, ValueError):
    """Bad configuration: strategy periods, initial cash, indicator period, empty series."""


class IndicatorUnavailableError(BacktestError, LookupError):
    """An aligned indicator value is missing for a date."""


class PriceDataError(BacktestError):
    """Price data could not be loaded from its source."""
