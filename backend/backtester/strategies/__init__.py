from backtester.strategies.base_strategy import BaseStrategy
from backtester.strategies.sma_crossover_strategy import SMACrossoverStrategy
from backtester.strategies.buy_and_hold_strategy import BuyAndHoldStrategy
from backtester.strategies.strategy_manager import StrategyManager

__all__ = [
    "BaseStrategy",
    "SMACrossoverStrategy",
    "BuyAndHoldStrategy",
    "StrategyManager",
]
