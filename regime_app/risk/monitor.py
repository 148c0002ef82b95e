"""Portfolio risk limit checks: daily loss circuit breaker, concentration, volatility."""

from dataclasses import dataclass, field
from typing import Iterable

import structlog

from ..errors import MalformedDataError

logger = structlog.get_logger(__name__)

VOLATILITY_ALERT_THRESHOLD = 0.05


@dataclass(frozen=True)
class RiskLimitSettings:
    circuit_breaker_threshold: float = 0.05    # daily loss as fraction of portfolio
    max_symbol_exposure: float = 0.25          # position value as fraction of portfolio


@dataclass(frozen=True)
class Position:
    symbol: str
    quantity: float
    current_price: float
    risk_amount: float = 0.0


@dataclass(frozen=True)
class RiskAlert:
    type: str
    severity: str
    message: str


@dataclass(frozen=True)
class RiskReport:
    circuit_breaker_triggered: bool
    risk_score: float
    portfolio_risk: float
    daily_loss_pct: float
    symbol_exposures: dict[str, float] = field(default_factory=dict)
    alerts: list[RiskAlert] = field(default_factory=list)


class RiskLimitMonitor:
    """Evaluates open positions and daily P&L against account limits.

    Produces a report only; halting trading and notifying users belong to
    the caller.
    """

    def __init__(self):
        self.logger = logger

    def check(
        self,
        positions: Iterable[Position],
        daily_pnl: float,
        portfolio_value: float,
        volatility: float,
        settings: RiskLimitSettings
    ) -> RiskReport:
        if portfolio_value <= 0:
            raise MalformedDataError(
                f"Portfolio value must be positive: {portfolio_value}",
                context={"portfolio_value": portfolio_value}
            )

        positions = list(positions)
        alerts = []

        daily_loss_pct = abs(daily_pnl) / portfolio_value
        circuit_breaker = daily_loss_pct > settings.circuit_breaker_threshold
        if circuit_breaker:
            alerts.append(RiskAlert(
                type="circuit_breaker",
                severity="critical",
                message=f"Daily loss limit exceeded: {daily_loss_pct * 100:.2f}%"
            ))

        exposures = self.symbol_exposures(positions, portfolio_value)
        for symbol, exposure in exposures.items():
            if exposure > settings.max_symbol_exposure:
                alerts.append(RiskAlert(
                    type="concentration_risk",
                    severity="high",
                    message=f"High concentration in {symbol}: {exposure * 100:.1f}%"
                ))

        if volatility > VOLATILITY_ALERT_THRESHOLD:
            alerts.append(RiskAlert(
                type="volatility_spike",
                severity="medium",
                message=f"High volatility detected: {volatility * 100:.2f}%"
            ))

        for alert in alerts:
            self.logger.warning(
                "Risk limit alert",
                alert_type=alert.type,
                severity=alert.severity,
                message=alert.message
            )

        return RiskReport(
            circuit_breaker_triggered=circuit_breaker,
            risk_score=self.overall_risk_score(daily_loss_pct, exposures, volatility),
            portfolio_risk=self.portfolio_risk(positions),
            daily_loss_pct=daily_loss_pct,
            symbol_exposures=exposures,
            alerts=alerts,
        )

    @staticmethod
    def symbol_exposures(positions: list[Position], portfolio_value: float) -> dict[str, float]:
        exposures: dict[str, float] = {}
        for position in positions:
            exposure = abs(position.quantity * position.current_price) / portfolio_value
            exposures[position.symbol] = exposures.get(position.symbol, 0.0) + exposure
        return exposures

    @staticmethod
    def portfolio_risk(positions: list[Position]) -> float:
        """Summed risk with a diversification discount of up to 20% at 10+ positions."""
        if not positions:
            return 0.0
        total_risk = sum(p.risk_amount for p in positions)
        diversification = min(1.0, len(positions) / 10)
        return total_risk * (1 - diversification * 0.2)

    @staticmethod
    def overall_risk_score(daily_loss_pct: float, exposures: dict[str, float],
                           volatility: float) -> float:
        score = 0.5 + daily_loss_pct * 2
        score += max(exposures.values(), default=0.0)
        score += volatility * 5
        return max(0.1, min(0.9, score))
