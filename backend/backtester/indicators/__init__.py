from backtester.indicators.moving_average import (
    current_moving_average,
    moving_average_values,
    simple_moving_average,
)

__all__ = [
    "current_moving_average",
    "moving_average_values",
    "simple_moving_average",
]
