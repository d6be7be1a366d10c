"""
Portfolio simulator for backtesting.

Tracks cash, share count and the append-only trade history for a single
instrument. The only way to change state is execute_trade().
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import logging

from backtester.exceptions import InvalidParameterError
from backtester.models.market_data import to_decimal
from backtester.models.signal import TradeAction
from backtester.models.trade import Trade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortfolioSnapshot:
    """
    Portfolio state at the close of one simulated bar.

    Records cash, shares and total value marked at the bar's closing price.
    """
    date: date
    cash: Decimal
    shares_owned: int
    total_value: Decimal
    market_price: Decimal

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "date": self.date.isoformat(),
            "cash": str(self.cash),
            "shares_owned": self.shares_owned,
            "total_value": str(self.total_value),
            "market_price": str(self.market_price),
        }


class Portfolio:
    """
    Cash-and-shares state machine.

    Invariants held after every call:
    - cash >= 0
    - shares_owned >= 0
    - trade_history only grows, in execution order

    Attributes:
        cash: Current cash balance
        shares_owned: Current position size
    """

    def __init__(self, initial_cash):
        initial_cash = to_decimal(initial_cash)
        if initial_cash < 0:
            raise InvalidParameterError("Initial cash cannot be negative")

        self._cash = initial_cash
        self._shares_owned = 0
        self._trade_history: list[Trade] = []

    @property
    def cash(self) -> Decimal:
        return self._cash

    @property
    def shares_owned(self) -> int:
        return self._shares_owned

    @property
    def trade_history(self) -> tuple[Trade, ...]:
        """Executed trades, oldest first."""
        return tuple(self._trade_history)

    def execute_trade(self, trade: Trade) -> bool:
        """
        Apply a trade if the portfolio can cover it.

        A buy needs cash >= trade.total_cost; a sell needs at least
        trade.share_count shares. A rejected trade leaves cash, shares and
        history untouched.

        Args:
            trade: The trade to apply

        Returns:
            True if the trade was applied, False if it was rejected
        """
        if trade.action == TradeAction.BUY:
            if self._cash < trade.total_cost:
                logger.warning(
                    f"Insufficient cash for {trade}. "
                    f"Required: {trade.total_cost:.2f}, Available: {self._cash:.2f}"
                )
                return False
        else:
            if self._shares_owned < trade.share_count:
                logger.warning(
                    f"Insufficient shares for {trade}. "
                    f"Required: {trade.share_count}, Owned: {self._shares_owned}"
                )
                return False

        # total_cost is negative for sells, so this credits proceeds
        self._cash -= trade.total_cost

        if trade.action == TradeAction.BUY:
            self._shares_owned += trade.share_count
        else:
            self._shares_owned -= trade.share_count

        self._trade_history.append(trade)
        return True

    def total_value(self, market_price) -> Decimal:
        """Cash plus shares marked at market_price."""
        return self._cash + self._shares_owned * to_decimal(market_price)

    def snapshot(self, day: date, market_price) -> PortfolioSnapshot:
        """Capture current state marked at market_price."""
        market_price = to_decimal(market_price)
        return PortfolioSnapshot(
            date=day,
            cash=self._cash,
            shares_owned=self._shares_owned,
            total_value=self.total_value(market_price),
            market_price=market_price,
        )

    @property
    def initial_value(self) -> Decimal:
        """Starting cash, recovered by unwinding every trade's cash impact."""
        return self._cash + sum((t.total_cost for t in self._trade_history), Decimal("0"))

    @property
    def total_commissions_paid(self) -> Decimal:
        return sum((t.commission for t in self._trade_history), Decimal("0"))

    @property
    def trade_count(self) -> int:
        return len(self._trade_history)

    def __repr__(self) -> str:
        return (
            f"<Portfolio cash={self._cash:.2f} shares={self._shares_owned} "
            f"trades={self.trade_count}>"
        )
