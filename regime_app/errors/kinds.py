"""Stable error kinds shared by exceptions and risk decisions."""

from enum import Enum


class ErrorKind(str, Enum):
    """Tag carried by every failure the engine reports to its caller."""
    OUT_OF_ORDER_TIMESTAMP = "OutOfOrderTimestamp"
    INSUFFICIENT_DATA = "InsufficientData"
    INVALID_QUANTITY = "InvalidQuantity"
    INVALID_PRICE = "InvalidPrice"
    RISK_EXCEEDED = "RiskExceeded"
    MAX_POSITIONS_REACHED = "MaxPositionsReached"
    MALFORMED_DATA = "MalformedData"
