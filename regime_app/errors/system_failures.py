"""
System failure error classifications for unrecoverable errors.

These exceptions represent engine-level failures that indicate a bug or a
broken collaborator rather than bad caller input.
"""

from typing import Any, Dict, Optional

from .kinds import ErrorKind


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class IndicatorCalculationError(SystemFailureError):
    """An indicator produced a non-finite value from finite inputs."""

    def __init__(self, message: str, indicator_name: Optional[str] = None,
                 calculation_input: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.indicator_name = indicator_name
        self.calculation_input = calculation_input


class StateTransitionError(SystemFailureError):
    """Invalid pipeline state transition."""

    def __init__(self, message: str, current_state: Optional[str] = None,
                 attempted_transition: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state
        self.attempted_transition = attempted_transition


class DeliveryError(SystemFailureError):
    """A snapshot sink failed to accept a published snapshot."""

    def __init__(self, message: str, sink_name: Optional[str] = None,
                 symbol: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.sink_name = sink_name
        self.symbol = symbol
