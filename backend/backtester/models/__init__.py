from backtester.models.market_data import PriceBar, to_decimal, validate_series
from backtester.models.signal import TradeAction, TradeSignal
from backtester.models.trade import Trade

__all__ = [
    "PriceBar",
    "to_decimal",
    "validate_series",
    "TradeAction",
    "TradeSignal",
    "Trade",
]
