"""Trade actions and strategy signals."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from backtester.models.market_data import to_decimal


class TradeAction(str, Enum):
    """Trade direction."""
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class TradeSignal:
    """
    A strategy's recommendation to buy or sell on a date at a reference price.

    The rationale is diagnostic text for reports; nothing downstream reads it.
    """
    date: date
    action: TradeAction
    reference_price: Decimal
    rationale: str = ""

    def __post_init__(self):
        object.__setattr__(self, "reference_price", to_decimal(self.reference_price))

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "action": self.action.value,
            "reference_price": str(self.reference_price),
            "rationale": self.rationale,
        }
