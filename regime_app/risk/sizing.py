"""
Capital-based position sizing methods.

These complement the risk gate's risk/price sizing with recommendations
expressed in capital terms: Kelly criterion, fixed percentage,
volatility-adjusted and risk parity.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class SizingMethod(str, Enum):
    KELLY = "kelly"
    FIXED_PERCENTAGE = "fixed_percentage"
    VOLATILITY_ADJUSTED = "volatility_adjusted"
    RISK_PARITY = "risk_parity"


@dataclass(frozen=True)
class SizingInputs:
    """Inputs for capital-based sizing. risk_per_trade is a fraction (0.01 = 1%)."""
    symbol: str
    capital: float
    risk_per_trade: float
    win_rate: Optional[float] = None
    avg_win: Optional[float] = None
    avg_loss: Optional[float] = None
    volatility: Optional[float] = None


@dataclass(frozen=True)
class SizingRecommendation:
    symbol: str
    method: SizingMethod
    recommended_size: float
    max_size: float
    risk_score: float
    confidence_level: float
    extras: dict[str, Any] = field(default_factory=dict)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class PositionSizer:
    """Computes capital-based position size recommendations."""

    KELLY_SAFETY_FACTOR = 0.25
    KELLY_MAX_FRACTION = 0.10
    FIXED_MAX_FRACTION = 0.15
    VOLATILITY_MAX_FRACTION = 0.12
    PARITY_MAX_FRACTION = 0.08
    PARITY_TARGET_CONTRIBUTION = 0.05
    DEFAULT_VOLATILITY = 0.02

    def calculate(self, method: str, inputs: SizingInputs) -> SizingRecommendation:
        """Dispatch to a sizing method. Unknown methods use fixed percentage."""
        try:
            sizing_method = SizingMethod(method)
        except ValueError:
            logger.warning(
                "Unknown sizing method, falling back to fixed percentage",
                method=method,
                symbol=inputs.symbol
            )
            sizing_method = SizingMethod.FIXED_PERCENTAGE

        handlers = {
            SizingMethod.KELLY: self.kelly,
            SizingMethod.FIXED_PERCENTAGE: self.fixed_percentage,
            SizingMethod.VOLATILITY_ADJUSTED: self.volatility_adjusted,
            SizingMethod.RISK_PARITY: self.risk_parity,
        }
        return handlers[sizing_method](inputs)

    def kelly(self, inputs: SizingInputs) -> SizingRecommendation:
        """Quarter-Kelly fraction, capped at 10% of capital."""
        win_rate = inputs.win_rate if inputs.win_rate is not None else 0.6
        avg_win = inputs.avg_win if inputs.avg_win is not None else 1.5
        avg_loss = inputs.avg_loss if inputs.avg_loss is not None else 1.0

        # f = (b*p - q) / b
        b = avg_win / avg_loss
        kelly_fraction = (b * win_rate - (1 - win_rate)) / b

        position_fraction = _clamp(kelly_fraction * self.KELLY_SAFETY_FACTOR, 0.0, self.KELLY_MAX_FRACTION)
        max_size = inputs.capital * self.KELLY_MAX_FRACTION
        recommended = inputs.capital * position_fraction * inputs.risk_per_trade

        return SizingRecommendation(
            symbol=inputs.symbol,
            method=SizingMethod.KELLY,
            recommended_size=min(recommended, max_size),
            max_size=max_size,
            risk_score=self.risk_score(position_fraction, inputs),
            confidence_level=0.95,
            extras={"kelly_fraction": kelly_fraction},
        )

    def fixed_percentage(self, inputs: SizingInputs) -> SizingRecommendation:
        max_size = inputs.capital * self.FIXED_MAX_FRACTION
        recommended = inputs.capital * inputs.risk_per_trade

        return SizingRecommendation(
            symbol=inputs.symbol,
            method=SizingMethod.FIXED_PERCENTAGE,
            recommended_size=min(recommended, max_size),
            max_size=max_size,
            risk_score=self.risk_score(inputs.risk_per_trade, inputs),
            confidence_level=0.85,
        )

    def volatility_adjusted(self, inputs: SizingInputs) -> SizingRecommendation:
        """Scale risk by 1/(volatility*50), bounded to [0.5, 2.0]."""
        volatility = inputs.volatility or self.DEFAULT_VOLATILITY
        adjustment = _clamp(1 / (volatility * 50), 0.5, 2.0)
        adjusted_risk = inputs.risk_per_trade * adjustment

        max_size = inputs.capital * self.VOLATILITY_MAX_FRACTION
        recommended = inputs.capital * adjusted_risk

        return SizingRecommendation(
            symbol=inputs.symbol,
            method=SizingMethod.VOLATILITY_ADJUSTED,
            recommended_size=min(recommended, max_size),
            max_size=max_size,
            risk_score=self.risk_score(adjusted_risk, inputs),
            confidence_level=0.88,
            extras={"volatility_adjustment": adjustment},
        )

    def risk_parity(self, inputs: SizingInputs) -> SizingRecommendation:
        volatility = inputs.volatility or self.DEFAULT_VOLATILITY
        parity_size = inputs.capital * self.PARITY_TARGET_CONTRIBUTION / volatility

        max_size = inputs.capital * self.PARITY_MAX_FRACTION
        recommended = min(parity_size, inputs.capital * inputs.risk_per_trade)

        return SizingRecommendation(
            symbol=inputs.symbol,
            method=SizingMethod.RISK_PARITY,
            recommended_size=min(recommended, max_size),
            max_size=max_size,
            risk_score=self.risk_score(self.PARITY_TARGET_CONTRIBUTION, inputs),
            confidence_level=0.92,
            extras={"target_risk_contribution": self.PARITY_TARGET_CONTRIBUTION},
        )

    @staticmethod
    def risk_score(position_fraction: float, inputs: SizingInputs) -> float:
        """Heuristic risk score in [0.1, 0.9]; larger and more volatile is riskier."""
        score = 0.5 + position_fraction * 2
        if inputs.volatility:
            score += inputs.volatility * 10
        if inputs.win_rate:
            score -= (inputs.win_rate - 0.5) * 0.5
        return _clamp(score, 0.1, 0.9)
