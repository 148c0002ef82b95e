"""
Time semantics utilities for market vs wall-clock time handling.

Market timestamps carried by price ticks are authoritative for every
derived value. Wall-clock time is only a fallback when no market time
exists.
"""

from datetime import datetime, timezone
from typing import Optional, Union

TimestampLike = Union[datetime, int, float, str]


def get_market_time(market_ts: Optional[datetime] = None) -> datetime:
    """
    Get the current market time, preferring market timestamp over wall-clock time.

    Args:
        market_ts: Optional market timestamp from data feed

    Returns:
        Market time as UTC datetime, falling back to wall-clock time if unavailable
    """
    if market_ts is not None:
        return market_ts

    return datetime.now(timezone.utc)


def to_market_time(value: TimestampLike) -> datetime:
    """
    Convert a feed timestamp to a timezone-aware UTC datetime.

    Integers and floats are epoch milliseconds. Strings are ISO8601; a
    trailing 'Z' is accepted. Naive datetimes are assumed to be UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value!r}") from e
    elif isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return to_market_time(int(text))
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_market_time(market_ts: datetime) -> str:
    """
    Format market timestamp for records and logging.

    Args:
        market_ts: Market timestamp to format

    Returns:
        ISO8601 formatted string
    """
    return market_ts.isoformat()
