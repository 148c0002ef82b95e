"""RSI and MACD calculations"""

from typing import Sequence

from .moving_average import calculate_ema, require_samples


def calculate_rsi(prices: Sequence[float], period: int = 14) -> float:
    """
    Relative Strength Index.

    Gains and losses are computed for every step of the series, then the
    last `period` of each are averaged:

    RS = avg_gain / avg_loss, RSI = 100 - 100 / (1 + RS)

    A window without losses saturates at 100, which includes a flat series.

    Args:
        prices: Prices ordered oldest to newest
        period: Averaging period (default 14)

    Returns:
        RSI in [0, 100]

    Raises:
        InsufficientDataError: fewer than period + 1 prices
    """
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")
    require_samples(prices, period + 1, "RSI")

    gains = []
    losses = []
    for i in range(1, len(prices)):
        change = prices[i] - prices[i - 1]
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)

    avg_gain = sum(gains[-period:]) / period
    avg_loss = sum(losses[-period:]) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def calculate_macd(prices: Sequence[float], fast_period: int = 12, slow_period: int = 26) -> float:
    """
    MACD line: EMA(fast) - EMA(slow), both over the same slice.

    Args:
        prices: Prices ordered oldest to newest
        fast_period: Fast EMA period (default 12)
        slow_period: Slow EMA period (default 26)

    Returns:
        MACD value, positive when the fast EMA is above the slow EMA
    """
    return calculate_ema(prices, fast_period) - calculate_ema(prices, slow_period)
