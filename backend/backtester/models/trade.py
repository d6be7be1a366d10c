"""
Executed trades.

Trades are immutable, append-only history: once a Portfolio accepts one it is
never edited or removed.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from backtester.exceptions import InvalidTradeError
from backtester.models.market_data import to_decimal
from backtester.models.signal import TradeAction


@dataclass(frozen=True)
class Trade:
    """
    A single buy or sell transaction.

    Attributes:
        date: Trade date
        action: BUY or SELL
        price_per_share: Execution price, must be positive
        share_count: Whole number of shares, must be positive
        commission: Flat fee for the trade, must not be negative
    """
    date: date
    action: TradeAction
    price_per_share: Decimal
    share_count: int
    commission: Decimal = Decimal("0")

    def __post_init__(self):
        object.__setattr__(self, "price_per_share", to_decimal(self.price_per_share))
        object.__setattr__(self, "commission", to_decimal(self.commission))

        if self.price_per_share <= 0:
            raise InvalidTradeError("Price must be positive")
        if isinstance(self.share_count, bool) or not isinstance(self.share_count, int):
            raise InvalidTradeError(f"Shares must be a whole number, got {self.share_count!r}")
        if self.share_count <= 0:
            raise InvalidTradeError("Shares must be positive")
        if self.commission < 0:
            raise InvalidTradeError("Commission cannot be negative")

    @property
    def gross_value(self) -> Decimal:
        """Price times shares, before fees."""
        return self.price_per_share * self.share_count

    @property
    def total_cost(self) -> Decimal:
        """
        Signed cash impact, applied as ``cash -= total_cost``.

        Positive for a buy (cash outflow including commission), negative for a
        sell (proceeds net of commission flowing back in).
        """
        if self.action == TradeAction.BUY:
            return self.gross_value + self.commission
        return -(self.gross_value - self.commission)

    def to_dict(self) -> dict:
        """Convert trade to dictionary for JSON serialization."""
        return {
            "date": self.date.isoformat(),
            "action": self.action.value,
            "price_per_share": str(self.price_per_share),
            "share_count": self.share_count,
            "commission": str(self.commission),
            "total_cost": str(self.total_cost),
        }

    def __str__(self) -> str:
        sign = "-" if self.total_cost < 0 else ""
        return (
            f"{self.date:%Y-%m-%d} {self.action.value} {self.share_count} shares "
            f"at ${self.price_per_share:,.2f} = {sign}${abs(self.total_cost):,.2f}"
        )
