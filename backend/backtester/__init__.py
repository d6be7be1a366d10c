"""Daily-bar strategy backtester."""

__version__ = "1.0.0"
