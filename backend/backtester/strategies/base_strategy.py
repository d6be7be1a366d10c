from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
import logging

from backtester.models.market_data import PriceBar
from backtester.models.signal import TradeSignal

logger = logging.getLogger(__name__)


class BaseStrategy(ABC):
    """
    Abstract base class for all trading strategies.

    A strategy sees the whole price history up front and returns every
    signal it would emit, oldest first. The engine only relies on
    name, description and generate_signals(); it never inspects config.

    All strategies must implement:
    - generate_signals(): Turn a price series into ordered trade signals
    - get_name(): Return strategy name for reports
    - get_description(): Return a human readable summary of the logic
    - get_default_config(): Return default configuration
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = {**self.get_default_config(), **(config or {})}
        self.validate_config()
        self.name = self.get_name()
        self.description = self.get_description()
        logger.info(f"Initialized strategy: {self.name}")

    @abstractmethod
    def generate_signals(self, series: Sequence[PriceBar]) -> List[TradeSignal]:
        """
        Generate trading signals from historical price data.

        Args:
            series: Daily price bars sorted oldest to newest

        Returns:
            Signals in ascending date order
        """

    @abstractmethod
    def get_name(self) -> str:
        """Return strategy name."""

    @abstractmethod
    def get_description(self) -> str:
        """Return a description of the strategy's logic."""

    @abstractmethod
    def get_default_config(self) -> Dict[str, Any]:
        """Return default configuration parameters."""

    def validate_config(self) -> None:
        """
        Validate self.config.

        Override in subclass; raise InvalidParameterError on bad values.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.config}>"
