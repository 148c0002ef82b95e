"""
Data quality error classifications for price series processing.

These exceptions describe problems with the inputs handed to the engine.
They are raised locally and surface unchanged to the caller, which owns
any retry policy.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from .kinds import ErrorKind


class DataQualityError(Exception):
    """Base class for input problems the caller can correct and resubmit."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class TemporalDataError(DataQualityError):
    """Timestamp or sequencing issues in price data."""

    def __init__(self, message: str, timestamp: Optional[datetime] = None,
                 last_timestamp: Optional[datetime] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.last_timestamp = last_timestamp


class OutOfOrderTimestampError(TemporalDataError):
    """A point older than the newest point already held by the series."""

    kind = ErrorKind.OUT_OF_ORDER_TIMESTAMP


class MissingDataError(DataQualityError):
    """Required data is completely missing."""

    kind = ErrorKind.MALFORMED_DATA

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class MalformedDataError(DataQualityError):
    """Data exists but is in an incorrect format or out of range."""

    kind = ErrorKind.MALFORMED_DATA

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format


class InvalidPriceError(MalformedDataError):
    """Price is zero, negative or not a finite number."""

    kind = ErrorKind.INVALID_PRICE


class InsufficientDataError(DataQualityError):
    """Not enough price history for the requested calculation."""

    kind = ErrorKind.INSUFFICIENT_DATA

    def __init__(self, message: str, required_count: Optional[int] = None,
                 available_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required_count = required_count
        self.available_count = available_count
