"""
Risk gate for order proposals.

Validates a proposed order against the account risk configuration and the
current market regime, and computes the risk-normalized position size.
Validation failures are returned as RiskDecision values carrying the
ErrorKind and a message the caller can show verbatim.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Optional

from ..config.defaults import RiskParams
from ..errors import ErrorKind
from ..logging.config import get_gating_logger, log_gate_decision
from ..models.orders import Number, OrderProposal, RiskConfig, RiskDecision
from ..models.regime import RegimeState

gating_logger = get_gating_logger(__name__)

MSG_INVALID_QUANTITY = "Quantity must be greater than 0"
MSG_RISK_NOT_POSITIVE = "Risk amount must be greater than 0"
MSG_RISK_EXCEEDED = "Risk amount exceeds daily limit"
MSG_INVALID_PRICE = "Price must be greater than 0"
MSG_MAX_POSITIONS = "Maximum open positions reached"
MSG_SIZE_TOO_SMALL = "Position size rounds to zero at the minimum increment"


def _to_decimal(value: Number) -> Optional[Decimal]:
    """Exact decimal for a numeric input, None if missing or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def round_down(value: Decimal, increment: Decimal) -> Decimal:
    """Round down to a whole multiple of increment, never up."""
    steps = (value / increment).to_integral_value(rounding=ROUND_DOWN)
    return steps * increment


class RiskGate:
    """Accepts or rejects order proposals and sizes accepted ones.

    evaluate() reads nothing but its arguments, so it needs no lock and may
    run concurrently with price updates for the same symbol.
    """

    def __init__(self, params: Optional[RiskParams] = None):
        self.params = params or RiskParams()
        self.logger = gating_logger

    def evaluate(
        self,
        proposal: OrderProposal,
        config: RiskConfig,
        current_regime: Optional[RegimeState],
        open_positions: Optional[int] = None
    ) -> RiskDecision:
        """
        Evaluate a proposal. The first failing check decides the rejection.

        Args:
            proposal: Order to validate
            config: Account risk settings
            current_regime: Regime snapshot for the proposal's symbol
            open_positions: Currently open positions, checked against
                config.max_positions when given

        Returns:
            RiskDecision with the final position size when accepted
        """
        decision = self._evaluate(proposal, config, current_regime, open_positions)

        log_gate_decision(
            self.logger,
            symbol=proposal.symbol,
            accepted=decision.accepted,
            reason=decision.reason.value if decision.reason else None,
            position_size=decision.position_size,
            context={
                "regime": current_regime.regime.value if current_regime else None,
                "side": getattr(proposal.side, "value", proposal.side),
            }
        )
        return decision

    def _evaluate(
        self,
        proposal: OrderProposal,
        config: RiskConfig,
        current_regime: Optional[RegimeState],
        open_positions: Optional[int]
    ) -> RiskDecision:
        quantity = _to_decimal(proposal.quantity)
        if quantity is None or quantity <= 0:
            return RiskDecision.reject(ErrorKind.INVALID_QUANTITY, MSG_INVALID_QUANTITY)

        risk_amount = _to_decimal(proposal.risk_amount)
        if risk_amount is None or risk_amount <= 0:
            return RiskDecision.reject(ErrorKind.RISK_EXCEEDED, MSG_RISK_NOT_POSITIVE)
        if risk_amount > config.daily_risk_limit:
            return RiskDecision.reject(ErrorKind.RISK_EXCEEDED, MSG_RISK_EXCEEDED)

        price = _to_decimal(proposal.price)
        if price is None or price <= 0:
            return RiskDecision.reject(ErrorKind.INVALID_PRICE, MSG_INVALID_PRICE)

        if open_positions is not None and open_positions >= config.max_positions:
            return RiskDecision.reject(ErrorKind.MAX_POSITIONS_REACHED, MSG_MAX_POSITIONS)

        increment = Decimal(str(self.params.min_increment))
        size = round_down(risk_amount / price, increment)

        if current_regime is not None and current_regime.is_high_volatility:
            haircut = Decimal(str(self.params.high_volatility_haircut))
            size = round_down(size * (Decimal(1) - haircut), increment)

        if size <= 0:
            return RiskDecision.reject(ErrorKind.INVALID_QUANTITY, MSG_SIZE_TOO_SMALL)

        return RiskDecision.accept(float(size))
