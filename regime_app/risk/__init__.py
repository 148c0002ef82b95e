"""Risk gating, position sizing and risk limit monitoring"""

from .gate import RiskGate
from .monitor import RiskLimitMonitor
from .sizing import PositionSizer

__all__ = ["RiskGate", "RiskLimitMonitor", "PositionSizer"]
