"""Rule-based market regime classification"""

from typing import Optional

from ..config.defaults import RegimeParams
from ..models.indicators import IndicatorSnapshot
from ..models.regime import Regime, RegimeState


class RegimeClassifier:
    """
    Maps one indicator snapshot to a regime.

    Rules are checked in a fixed order and the first match wins:

    1. macd > 0 and rsi < overbought        -> trend
    2. rsi > overbought or rsi < oversold   -> high_volatility
    3. otherwise                            -> range

    A snapshot that satisfies rules 1 and 2 is trend. There is no memory
    between calls, so the regime can change on every snapshot.
    """

    def __init__(self, params: Optional[RegimeParams] = None):
        self.params = params or RegimeParams()

    def classify(self, snapshot: IndicatorSnapshot) -> RegimeState:
        p = self.params

        if snapshot.macd > 0 and snapshot.rsi < p.rsi_overbought:
            return RegimeState(
                symbol=snapshot.symbol,
                regime=Regime.TREND,
                confidence=p.trend_confidence,
                trend_strength=p.trend_strength,
                volatility=p.baseline_volatility,
                computed_at=snapshot.computed_at,
            )

        if snapshot.rsi > p.rsi_overbought or snapshot.rsi < p.rsi_oversold:
            return RegimeState(
                symbol=snapshot.symbol,
                regime=Regime.HIGH_VOLATILITY,
                confidence=p.high_volatility_confidence,
                trend_strength=0.0,
                volatility=p.high_volatility,
                computed_at=snapshot.computed_at,
            )

        return RegimeState(
            symbol=snapshot.symbol,
            regime=Regime.RANGE,
            confidence=p.range_confidence,
            trend_strength=0.0,
            volatility=p.baseline_volatility,
            computed_at=snapshot.computed_at,
        )
