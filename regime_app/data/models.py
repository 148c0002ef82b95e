"""
Canonical data models for normalized price data.

PricePoint is an immutable validated tick. PriceSeries is the bounded
per-symbol rolling window every indicator reads from.
"""

import math
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..errors import InvalidPriceError, MalformedDataError, OutOfOrderTimestampError


@dataclass(frozen=True)
class PricePoint:
    """Single timestamped price observation for one symbol."""
    symbol: str
    price: float
    volume: float
    timestamp: datetime     # UTC market timestamp

    def __post_init__(self):
        if not self.symbol:
            raise MalformedDataError("Price point missing symbol")
        if not isinstance(self.price, (int, float)) or isinstance(self.price, bool):
            raise InvalidPriceError(f"Invalid price type: {type(self.price).__name__}")
        if math.isnan(self.price) or math.isinf(self.price) or self.price <= 0:
            raise InvalidPriceError(
                f"Price must be a positive finite number: {self.price}",
                context={"symbol": self.symbol}
            )
        if not isinstance(self.volume, (int, float)) or isinstance(self.volume, bool):
            raise MalformedDataError(f"Invalid volume type: {type(self.volume).__name__}")
        if math.isnan(self.volume) or math.isinf(self.volume) or self.volume < 0:
            raise MalformedDataError(
                f"Volume must be a non-negative finite number: {self.volume}",
                context={"symbol": self.symbol}
            )
        if not isinstance(self.timestamp, datetime):
            raise MalformedDataError(
                f"Timestamp must be a datetime, got {type(self.timestamp).__name__}",
                expected_format="datetime"
            )
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            raise MalformedDataError(
                f"Timestamp must be timezone-aware: {self.timestamp.isoformat()}",
                expected_format="timezone-aware datetime"
            )


class PriceSeries:
    """Bounded, time-ordered price history for a single symbol.

    Oldest points are evicted once capacity is reached. A point carrying the
    same timestamp as the newest point replaces it, so re-delivered ticks
    are idempotent. Not thread-safe; the owning pipeline serializes access.
    """

    def __init__(self, symbol: str, capacity: int = 50):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.symbol = symbol
        self._points: deque[PricePoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen

    @property
    def last_timestamp(self) -> Optional[datetime]:
        return self._points[-1].timestamp if self._points else None

    @property
    def last_price(self) -> Optional[float]:
        return self._points[-1].price if self._points else None

    def __len__(self) -> int:
        return len(self._points)

    def append(self, point: PricePoint) -> None:
        """
        Add a point to the series.

        Raises:
            OutOfOrderTimestampError: point is older than the newest point
            MalformedDataError: point belongs to another symbol
        """
        if point.symbol != self.symbol:
            raise MalformedDataError(
                f"Point for {point.symbol} appended to {self.symbol} series",
                context={"series_symbol": self.symbol, "point_symbol": point.symbol}
            )

        last_ts = self.last_timestamp
        if last_ts is not None:
            if point.timestamp < last_ts:
                raise OutOfOrderTimestampError(
                    f"Timestamp {point.timestamp.isoformat()} is older than "
                    f"last timestamp {last_ts.isoformat()}",
                    timestamp=point.timestamp,
                    last_timestamp=last_ts,
                    context={"symbol": self.symbol}
                )
            if point.timestamp == last_ts:
                self._points[-1] = point
                return

        self._points.append(point)

    def window(self, n: int) -> list[float]:
        """Most recent n prices, oldest first. May return fewer than n."""
        if n <= 0:
            return []
        points = list(self._points)[-n:]
        return [p.price for p in points]

    def points(self) -> list[PricePoint]:
        """Copy of all retained points, oldest first."""
        return list(self._points)
