"""Base classes for handing snapshots to persistence collaborators."""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from ..errors import DeliveryError
from ..models.indicators import IndicatorSnapshot
from ..models.regime import RegimeState


class BaseSnapshotSink(ABC):
    """Receives every indicator snapshot and regime the pipeline computes.

    Storage format and transport belong to the implementation. Sinks are
    called while the symbol's update is still serialized, so they see
    snapshots for one symbol in order.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"snapshot.sink.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def publish(self, snapshot: IndicatorSnapshot, regime: RegimeState) -> None:
        """
        Accept one snapshot/regime pair.

        Args:
            snapshot: Indicator snapshot just computed
            regime: Regime classified from that snapshot
        """
        pass

    def deliver(self, snapshot: IndicatorSnapshot, regime: RegimeState) -> None:
        """
        Publish and track statistics.

        Raises:
            DeliveryError: If the sink implementation fails
        """
        try:
            self.publish(snapshot, regime)
        except Exception as e:
            self._error_count += 1
            self.logger.error(
                "Snapshot delivery failed",
                sink=self.name,
                symbol=snapshot.symbol,
                error=str(e),
                error_type=type(e).__name__
            )
            raise DeliveryError(
                f"Sink {self.name} failed for {snapshot.symbol}: {e}",
                sink_name=self.name,
                symbol=snapshot.symbol
            ) from e
        self._delivery_count += 1

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        total = self._delivery_count + self._error_count
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": self._delivery_count / total if total > 0 else 0.0,
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0
