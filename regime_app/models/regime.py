"""Market regime models"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..utils.time import format_market_time


class Regime(str, Enum):
    """Coarse market state used to gate risk."""
    TREND = "trend"
    RANGE = "range"
    HIGH_VOLATILITY = "high_volatility"


@dataclass(frozen=True)
class RegimeState:
    """Regime classification derived from exactly one indicator snapshot."""
    symbol: str
    regime: Regime
    confidence: float          # [0, 1]
    trend_strength: float      # [0, 1]
    volatility: float          # >= 0
    computed_at: datetime

    @property
    def is_high_volatility(self) -> bool:
        return self.regime == Regime.HIGH_VOLATILITY

    def to_record(self) -> dict[str, Any]:
        """Flat row in the market_regimes layout."""
        return {
            "symbol": self.symbol,
            "regime": self.regime.value,
            "confidence": self.confidence,
            "trend_strength": self.trend_strength,
            "volatility": self.volatility,
            "timestamp": format_market_time(self.computed_at),
        }
