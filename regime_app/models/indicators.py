"""Data models for indicator calculations"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..utils.time import format_market_time


@dataclass(frozen=True)
class BollingerBands:
    """Bollinger envelope around the simple moving average."""
    upper: float
    lower: float
    middle: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


@dataclass(frozen=True)
class IndicatorSnapshot:
    """All indicators for one symbol, computed from a single price window.

    Snapshots are never mutated; each recompute produces a new one that
    replaces the previous snapshot for the symbol.
    """
    symbol: str
    rsi: float
    macd: float
    bollinger: BollingerBands
    sma20: float
    ema12: float
    ema26: float
    computed_at: datetime

    def to_record(self) -> dict[str, Any]:
        """Flat row in the technical_indicators layout."""
        return {
            "symbol": self.symbol,
            "rsi": self.rsi,
            "macd": self.macd,
            "bb_upper": self.bollinger.upper,
            "bb_lower": self.bollinger.lower,
            "sma_20": self.sma20,
            "ema_12": self.ema12,
            "ema_26": self.ema26,
            "timestamp": format_market_time(self.computed_at),
        }
