"""Indicator calculator producing one consistent snapshot per price window"""

import math
from datetime import datetime
from typing import Optional, Sequence

from ..config.defaults import IndicatorParams
from ..errors import IndicatorCalculationError
from ..models.indicators import IndicatorSnapshot
from .bands import calculate_bollinger_bands
from .momentum import calculate_rsi
from .moving_average import calculate_ema, calculate_sma, require_samples


class IndicatorCalculator:
    """
    Computes every indicator of a snapshot from the same price window.

    The calculator holds configuration only. Callers pass the full retained
    window so that EMA12 and EMA26 share their seed price.
    """

    def __init__(self, params: Optional[IndicatorParams] = None):
        self.params = params or IndicatorParams()

    @property
    def min_points(self) -> int:
        """Minimum window length for a well-defined snapshot."""
        return max(
            self.params.sma_period,
            self.params.bollinger_period,
            self.params.rsi_period + 1,
        )

    def calculate(self, symbol: str, prices: Sequence[float],
                  computed_at: datetime) -> IndicatorSnapshot:
        """
        Calculate a full snapshot.

        Args:
            symbol: Symbol the prices belong to
            prices: Window ordered oldest to newest
            computed_at: Market time of the newest price

        Returns:
            IndicatorSnapshot

        Raises:
            InsufficientDataError: window shorter than min_points
            IndicatorCalculationError: an indicator came out non-finite
        """
        require_samples(prices, self.min_points, "IndicatorSnapshot")

        p = self.params
        ema_fast = calculate_ema(prices, p.ema_fast)
        ema_slow = calculate_ema(prices, p.ema_slow)

        snapshot = IndicatorSnapshot(
            symbol=symbol,
            rsi=calculate_rsi(prices, p.rsi_period),
            macd=ema_fast - ema_slow,
            bollinger=calculate_bollinger_bands(prices, p.bollinger_period, p.bollinger_std),
            sma20=calculate_sma(prices, p.sma_period),
            ema12=ema_fast,
            ema26=ema_slow,
            computed_at=computed_at,
        )

        self._validate_snapshot(snapshot, len(prices))
        return snapshot

    def _validate_snapshot(self, snapshot: IndicatorSnapshot, window_size: int) -> None:
        values = {
            "rsi": snapshot.rsi,
            "macd": snapshot.macd,
            "bb_upper": snapshot.bollinger.upper,
            "bb_lower": snapshot.bollinger.lower,
            "sma": snapshot.sma20,
            "ema_fast": snapshot.ema12,
            "ema_slow": snapshot.ema26,
        }
        for name, value in values.items():
            if math.isnan(value) or math.isinf(value):
                raise IndicatorCalculationError(
                    f"Invalid {name} value: {value}",
                    indicator_name=name,
                    calculation_input={"symbol": snapshot.symbol, "window_size": window_size}
                )

        if not 0.0 <= snapshot.rsi <= 100.0:
            raise IndicatorCalculationError(
                f"RSI out of range: {snapshot.rsi}",
                indicator_name="rsi",
                calculation_input={"symbol": snapshot.symbol, "window_size": window_size}
            )
