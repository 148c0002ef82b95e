"""
Error classification system for the regime engine.

Data quality errors describe bad or premature input and carry an ErrorKind
the caller can render; system failures describe broken invariants.
"""

from .kinds import ErrorKind
from .data_quality import (
    DataQualityError,
    TemporalDataError,
    OutOfOrderTimestampError,
    MissingDataError,
    MalformedDataError,
    InvalidPriceError,
    InsufficientDataError,
)
from .system_failures import (
    SystemFailureError,
    IndicatorCalculationError,
    StateTransitionError,
    DeliveryError,
)

__all__ = [
    "ErrorKind",
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "OutOfOrderTimestampError",
    "MissingDataError",
    "MalformedDataError",
    "InvalidPriceError",
    "InsufficientDataError",
    # System Failures
    "SystemFailureError",
    "IndicatorCalculationError",
    "StateTransitionError",
    "DeliveryError",
]
