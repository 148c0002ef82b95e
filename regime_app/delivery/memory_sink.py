"""In-memory snapshot sink for dashboards and tests."""

from collections import deque
from typing import Any, Optional

from ..models.indicators import IndicatorSnapshot
from ..models.regime import RegimeState
from .base import BaseSnapshotSink


class MemorySnapshotSink(BaseSnapshotSink):
    """Keeps the latest records per symbol plus a bounded history."""

    def __init__(self, name: str = "memory", history_size: int = 100):
        super().__init__(name)
        self.latest_indicators: dict[str, dict[str, Any]] = {}
        self.latest_regimes: dict[str, dict[str, Any]] = {}
        self.history: deque[dict[str, Any]] = deque(maxlen=history_size)

    def publish(self, snapshot: IndicatorSnapshot, regime: RegimeState) -> None:
        indicators = snapshot.to_record()
        regime_record = regime.to_record()

        self.latest_indicators[snapshot.symbol] = indicators
        self.latest_regimes[regime.symbol] = regime_record
        self.history.append({"indicators": indicators, "regime": regime_record})

    def get_latest(self, symbol: str) -> Optional[dict[str, Any]]:
        if symbol not in self.latest_indicators:
            return None
        return {
            "indicators": self.latest_indicators[symbol],
            "regime": self.latest_regimes[symbol],
        }
