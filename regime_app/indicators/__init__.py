"""Technical indicator engine"""

from .bands import calculate_bollinger_bands
from .calculator import IndicatorCalculator
from .momentum import calculate_macd, calculate_rsi
from .moving_average import calculate_ema, calculate_sma

__all__ = [
    "IndicatorCalculator",
    "calculate_sma",
    "calculate_ema",
    "calculate_rsi",
    "calculate_macd",
    "calculate_bollinger_bands",
]
