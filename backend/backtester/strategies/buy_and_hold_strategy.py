from typing import Any, Dict, List, Sequence

from backtester.models.market_data import PriceBar
from backtester.models.signal import TradeAction, TradeSignal
from backtester.strategies.base_strategy import BaseStrategy


class BuyAndHoldStrategy(BaseStrategy):
    """
    Buy on the first bar and never sell.

    Baseline for strategy comparisons: any active strategy should be judged
    against simply holding the instrument.
    """

    def __init__(self):
        super().__init__()

    def get_name(self) -> str:
        return "Buy and Hold"

    def get_description(self) -> str:
        return "Buy with all available cash on the first day and hold to the end"

    def get_default_config(self) -> Dict[str, Any]:
        return {}

    def generate_signals(self, series: Sequence[PriceBar]) -> List[TradeSignal]:
        if not series:
            return []
        first = series[0]
        return [
            TradeSignal(
                date=first.date,
                action=TradeAction.BUY,
                reference_price=first.close,
                rationale="Initial buy-and-hold entry",
            )
        ]
