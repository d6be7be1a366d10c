from typing import Any, Dict, List, Optional, Type
import logging

from backtester.exceptions import InvalidParameterError
from backtester.strategies.base_strategy import BaseStrategy
from backtester.strategies.buy_and_hold_strategy import BuyAndHoldStrategy
from backtester.strategies.sma_crossover_strategy import SMACrossoverStrategy

logger = logging.getLogger(__name__)


class StrategyManager:
    """Registry of strategies that can be built by key."""

    STRATEGIES: Dict[str, Type[BaseStrategy]] = {
        "sma_crossover": SMACrossoverStrategy,
        "buy_and_hold": BuyAndHoldStrategy,
    }

    @classmethod
    def get_available_strategies(cls) -> Dict[str, Type[BaseStrategy]]:
        """Return registry key to strategy class mapping."""
        return dict(cls.STRATEGIES)

    @classmethod
    def list_strategies(cls) -> List[str]:
        """List all registered strategy keys."""
        return list(cls.STRATEGIES.keys())

    @classmethod
    def create_strategy(cls, key: str, params: Optional[Dict[str, Any]] = None) -> BaseStrategy:
        """
        Build a strategy instance from its registry key.

        Args:
            key: Registry key, e.g. "sma_crossover"
            params: Keyword arguments for the strategy constructor

        Raises:
            InvalidParameterError: unknown key or unsupported parameters
        """
        strategy_class = cls.STRATEGIES.get(key)
        if strategy_class is None:
            raise InvalidParameterError(
                f"Strategy '{key}' not found. Available: {cls.list_strategies()}"
            )

        try:
            strategy = strategy_class(**(params or {}))
        except TypeError as e:
            raise InvalidParameterError(f"Invalid parameters for '{key}': {e}") from e

        logger.debug(f"Created strategy '{key}': {strategy.name}")
        return strategy
