"""Bollinger Bands calculation"""

import math
from typing import Sequence

from ..models.indicators import BollingerBands
from .moving_average import calculate_sma


def calculate_bollinger_bands(prices: Sequence[float], period: int = 20,
                              num_std: float = 2.0) -> BollingerBands:
    """
    Bollinger Bands over the last `period` prices.

    middle = SMA(period), band = num_std * population standard deviation

    Args:
        prices: Prices ordered oldest to newest
        period: Window size (default 20)
        num_std: Band width in standard deviations (default 2)

    Returns:
        BollingerBands with upper, lower and middle

    Raises:
        InsufficientDataError: fewer than `period` prices
    """
    middle = calculate_sma(prices, period)
    window = prices[-period:]

    variance = sum((price - middle) ** 2 for price in window) / period
    band = num_std * math.sqrt(variance)

    return BollingerBands(
        upper=middle + band,
        lower=middle - band,
        middle=middle
    )
