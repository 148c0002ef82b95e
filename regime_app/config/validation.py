"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_series_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate series parameters."""
        errors = []

        for name in ("capacity", "warmup_points"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=f"series.{name}",
                    message="Must be a positive integer",
                    value=params[name]
                ))

        capacity = params.get("capacity")
        warmup = params.get("warmup_points")
        if _is_positive_int(capacity) and _is_positive_int(warmup) and warmup > capacity:
            errors.append(ValidationError(
                field="series.warmup_points",
                message="Must not exceed series capacity",
                value=warmup
            ))

        return errors

    @staticmethod
    def validate_indicator_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate indicator periods."""
        errors = []

        for name in ("sma_period", "ema_fast", "ema_slow", "rsi_period", "bollinger_period"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=f"indicators.{name}",
                    message="Must be a positive integer",
                    value=params[name]
                ))

        if "bollinger_std" in params:
            value = params["bollinger_std"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="indicators.bollinger_std",
                    message="Must be a positive number",
                    value=value
                ))

        fast = params.get("ema_fast")
        slow = params.get("ema_slow")
        if _is_positive_int(fast) and _is_positive_int(slow) and fast >= slow:
            errors.append(ValidationError(
                field="indicators.ema_fast",
                message="Must be shorter than ema_slow",
                value=fast
            ))

        return errors

    @staticmethod
    def validate_risk_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate order sizing parameters."""
        errors = []

        if "min_increment" in params:
            value = params["min_increment"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="risk.min_increment",
                    message="Must be a positive number",
                    value=value
                ))

        if "high_volatility_haircut" in params:
            value = params["high_volatility_haircut"]
            if not _is_number(value) or value < 0 or value >= 1:
                errors.append(ValidationError(
                    field="risk.high_volatility_haircut",
                    message="Must be a number in [0, 1)",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_risk_config(settings: dict[str, Any]) -> list[ValidationError]:
        """Validate an account risk settings mapping."""
        errors = []

        for name in ("risk_per_trade_pct", "daily_stop_loss_pct"):
            if name in settings:
                value = settings[name]
                if not _is_number(value) or value <= 0 or value > 100:
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a percentage in (0, 100]",
                        value=value
                    ))

        if "max_positions" in settings and not _is_positive_int(settings["max_positions"]):
            errors.append(ValidationError(
                field="max_positions",
                message="Must be a positive integer",
                value=settings["max_positions"]
            ))

        if "capital" in settings:
            value = settings["capital"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="capital",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "series" in config:
            errors.extend(ConfigValidator.validate_series_params(config["series"]))

        if "indicators" in config:
            errors.extend(ConfigValidator.validate_indicator_params(config["indicators"]))

        if "risk" in config:
            errors.extend(ConfigValidator.validate_risk_params(config["risk"]))

        return errors
