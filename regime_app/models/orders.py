"""Order proposal, account risk configuration and gate decision models"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ..errors import ErrorKind, MissingDataError

Number = Union[int, float, Decimal]


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class OrderProposal:
    """Hypothetical order handed in by the trading UI or order intake."""
    symbol: str
    quantity: Number
    risk_amount: Number
    price: Number
    side: OrderSide = OrderSide.BUY


@dataclass(frozen=True)
class RiskConfig:
    """Account risk settings supplied by the account/config collaborator."""
    risk_per_trade_pct: float
    daily_stop_loss_pct: float
    max_positions: int
    capital: float

    @property
    def daily_risk_limit(self) -> Decimal:
        """Largest risk amount a single proposal may carry."""
        return Decimal(str(self.capital)) * Decimal(str(self.daily_stop_loss_pct)) / Decimal(100)

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "RiskConfig":
        """Build from an account settings row.

        Accepts both the bot configuration column names (risk_per_trade,
        daily_stop_loss, capital_cad) and this model's field names.
        """
        def pick(*keys: str) -> Any:
            for key in keys:
                if settings.get(key) is not None:
                    return settings[key]
            raise MissingDataError(
                f"Risk settings missing '{keys[0]}'",
                data_type="risk_config",
                context={"available_fields": sorted(settings)}
            )

        return cls(
            risk_per_trade_pct=float(pick("risk_per_trade_pct", "risk_per_trade")),
            daily_stop_loss_pct=float(pick("daily_stop_loss_pct", "daily_stop_loss")),
            max_positions=int(pick("max_positions")),
            capital=float(pick("capital", "capital_cad")),
        )


@dataclass(frozen=True)
class RiskDecision:
    """Outcome of one order proposal evaluation."""
    accepted: bool
    reason: Optional[ErrorKind] = None
    message: Optional[str] = None
    position_size: Optional[float] = None

    @classmethod
    def accept(cls, position_size: float) -> "RiskDecision":
        return cls(accepted=True, position_size=position_size)

    @classmethod
    def reject(cls, reason: ErrorKind, message: str) -> "RiskDecision":
        return cls(accepted=False, reason=reason, message=message)
