"""SMA and EMA calculations"""

from typing import Sequence

from ..errors import InsufficientDataError


def require_samples(prices: Sequence[float], required: int, indicator: str) -> None:
    """Raise InsufficientDataError when fewer than `required` prices are given."""
    if len(prices) < required:
        raise InsufficientDataError(
            f"{indicator} requires at least {required} prices, got {len(prices)}",
            required_count=required,
            available_count=len(prices),
            context={"indicator": indicator}
        )


def _check_period(period: int) -> None:
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")


def calculate_sma(prices: Sequence[float], period: int) -> float:
    """
    Simple moving average of the last `period` prices.

    Args:
        prices: Prices ordered oldest to newest
        period: Number of trailing prices to average

    Returns:
        Arithmetic mean of the trailing window

    Raises:
        InsufficientDataError: fewer than `period` prices
    """
    _check_period(period)
    require_samples(prices, period, "SMA")

    window = prices[-period:]
    return sum(window) / period


def calculate_ema(prices: Sequence[float], period: int) -> float:
    """
    Exponential moving average over the whole slice.

    EMA = price * k + EMA_prev * (1 - k), k = 2 / (period + 1)

    The recurrence is seeded with the first element of `prices`, not with
    an SMA warm-up. The result therefore depends on where the slice starts:
    EMAs that are compared with each other (EMA12 vs EMA26 for MACD) must be
    computed over the same slice.

    Args:
        prices: Prices ordered oldest to newest
        period: Smoothing period

    Returns:
        EMA at the newest price

    Raises:
        InsufficientDataError: empty price sequence
    """
    _check_period(period)
    require_samples(prices, 1, "EMA")

    k = 2.0 / (period + 1)
    ema = prices[0]
    for price in prices[1:]:
        ema = price * k + ema * (1 - k)
    return ema
