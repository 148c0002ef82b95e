"""
Per-symbol pipeline state models.

Each symbol owns one SymbolRuntime: its price series, the single-slot
indicator snapshot and regime, and the lock that serializes updates.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..data.models import PriceSeries
from ..errors import StateTransitionError
from ..indicators.calculator import IndicatorCalculator
from ..models.indicators import IndicatorSnapshot
from ..models.regime import RegimeState
from ..regime.classifier import RegimeClassifier
from ..risk.gate import RiskGate


class PipelineState(str, Enum):
    """Symbol lifecycle. READY is never left once reached."""
    EMPTY = "empty"
    WARMING = "warming"
    READY = "ready"


@dataclass
class SymbolRuntime:
    """Mutable state for one symbol, guarded by `lock`."""

    symbol: str
    series: PriceSeries
    calculator: IndicatorCalculator
    classifier: RegimeClassifier
    gate: RiskGate
    warmup_points: int

    state: PipelineState = PipelineState.EMPTY
    snapshot: Optional[IndicatorSnapshot] = None
    regime: Optional[RegimeState] = None

    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def next_state(self) -> PipelineState:
        """State implied by the current series length."""
        if self.state == PipelineState.READY:
            return PipelineState.READY
        if len(self.series) >= self.warmup_points:
            return PipelineState.READY
        if len(self.series) > 0:
            return PipelineState.WARMING
        return PipelineState.EMPTY

    def transition(self, new_state: PipelineState) -> None:
        """Move to `new_state`. Leaving READY is a broken invariant."""
        if self.state == PipelineState.READY and new_state != PipelineState.READY:
            raise StateTransitionError(
                f"{self.symbol} cannot leave READY",
                current_state=self.state.value,
                attempted_transition=new_state.value
            )
        self.state = new_state
