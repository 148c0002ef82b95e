"""Stream snapshot sink writing one JSON line or a pretty line per update."""

import json
import sys
from typing import Optional, TextIO

from ..models.indicators import IndicatorSnapshot
from ..models.regime import RegimeState
from .base import BaseSnapshotSink


class StdoutSnapshotSink(BaseSnapshotSink):
    """Writes snapshot records to a text stream (stdout by default)."""

    def __init__(self, name: str = "stdout", format: str = "json",
                 stream: Optional[TextIO] = None):
        super().__init__(name)
        if format not in ("json", "pretty"):
            raise ValueError(f"Unsupported format: {format}")
        self.format = format
        self.stream = stream

    def publish(self, snapshot: IndicatorSnapshot, regime: RegimeState) -> None:
        stream = self.stream or sys.stdout
        print(self._format(snapshot, regime), file=stream, flush=True)

    def _format(self, snapshot: IndicatorSnapshot, regime: RegimeState) -> str:
        if self.format == "pretty":
            return (
                f"[{snapshot.computed_at.isoformat()}] {snapshot.symbol} -> {regime.regime.value} "
                f"(confidence: {regime.confidence:.2f}, rsi: {snapshot.rsi:.1f}, macd: {snapshot.macd:.4f})"
            )
        return json.dumps({
            "indicators": snapshot.to_record(),
            "regime": regime.to_record(),
        })
