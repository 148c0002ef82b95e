"""
Tick normalization for converting raw market data rows to PricePoints.

The ingestion job hands in market_data rows (dicts or JSON strings) with
string or numeric fields. This module converts them to validated
PricePoints and raises typed data quality errors for anything unusable.
"""

import json
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Union

import structlog

from ..errors import InvalidPriceError, MalformedDataError, MissingDataError
from ..utils.time import to_market_time
from .models import PricePoint

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("symbol", "price", "timestamp")


def _to_float(value: Any, field: str) -> float:
    """Parse a numeric field that may arrive as str, int, float or Decimal."""
    if isinstance(value, bool):
        raise MalformedDataError(f"Invalid {field}: {value!r}", raw_data=str(value))
    try:
        number = float(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError) as e:
        raise MalformedDataError(
            f"Invalid {field}: {value!r}",
            raw_data=str(value)[:100],
            expected_format="decimal"
        ) from e
    if math.isnan(number) or math.isinf(number):
        raise MalformedDataError(f"Non-finite {field}: {value!r}", raw_data=str(value))
    return number


class TickNormalizer:
    """Converts raw tick payloads into PricePoints."""

    def __init__(self):
        self.logger = logger
        self.processed_count = 0
        self.rejected_count = 0

    def normalize_tick(self, payload: Union[dict[str, Any], str, bytes]) -> PricePoint:
        """
        Normalize a single tick.

        Args:
            payload: Row with symbol, price, timestamp and optional volume,
                either as a dict or a JSON document

        Returns:
            Validated PricePoint

        Raises:
            MissingDataError: A required field is absent
            MalformedDataError: A field cannot be parsed
            InvalidPriceError: Price is not positive
        """
        try:
            point = self._normalize(payload)
        except (MissingDataError, MalformedDataError) as e:
            self.rejected_count += 1
            self.logger.debug(
                "Rejected tick",
                error=str(e),
                error_type=type(e).__name__
            )
            raise
        self.processed_count += 1
        return point

    def normalize_rows(self, rows: Iterable[Union[dict[str, Any], str, bytes]]) -> list[PricePoint]:
        """
        Normalize a batch of rows and return them oldest first.

        History queries return rows newest first; the sort restores
        chronological order before the rows are appended to a series.
        """
        points = [self.normalize_tick(row) for row in rows]
        points.sort(key=lambda p: p.timestamp)
        return points

    def _normalize(self, payload: Union[dict[str, Any], str, bytes]) -> PricePoint:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                raise MalformedDataError(
                    f"Invalid JSON tick payload: {e}",
                    raw_data=str(payload)[:100],
                    expected_format="json"
                ) from e

        if not isinstance(payload, dict):
            raise MalformedDataError(
                f"Tick payload must be dict, got {type(payload).__name__}",
                raw_data=str(payload)[:100]
            )

        missing = [f for f in REQUIRED_FIELDS if payload.get(f) in (None, "")]
        if missing:
            raise MissingDataError(
                f"Tick missing required fields: {', '.join(missing)}",
                data_type="tick",
                context={"missing_fields": missing}
            )

        price = _to_float(payload["price"], "price")
        if price <= 0:
            raise InvalidPriceError(f"Non-positive price: {price}", raw_data=str(payload["price"]))

        volume_raw = payload.get("volume")
        volume = 0.0 if volume_raw in (None, "") else _to_float(volume_raw, "volume")

        try:
            timestamp = to_market_time(payload["timestamp"])
        except ValueError as e:
            raise MalformedDataError(
                f"Invalid timestamp: {payload['timestamp']!r}",
                raw_data=str(payload["timestamp"]),
                expected_format="ISO8601 or epoch milliseconds"
            ) from e

        return PricePoint(
            symbol=str(payload["symbol"]).strip(),
            price=price,
            volume=volume,
            timestamp=timestamp,
        )
