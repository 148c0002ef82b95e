"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..models.orders import RiskConfig
from .defaults import (
    DefaultConfig,
    IndicatorParams,
    RegimeParams,
    RiskParams,
    SeriesParams,
    get_default_config,
)
from .validation import ConfigValidator

SECTIONS = {
    "series": SeriesParams,
    "indicators": IndicatorParams,
    "regime": RegimeParams,
    "risk": RiskParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            return {}

        with open(path) as f:
            return yaml.safe_load(f) or {}

    def load_symbol_config(self, symbol: str) -> dict[str, Any]:
        """Load symbol-specific configuration overrides."""
        symbols_config = self._load_yaml("symbols.yaml")
        return symbols_config.get("symbols", {}).get(symbol, {})  # type: ignore[no-any-return]

    def configured_symbols(self) -> list[str]:
        """Symbols that carry overrides in symbols.yaml."""
        return sorted(self._load_yaml("symbols.yaml").get("symbols", {}))

    def merge_config(
        self,
        symbol: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Per-call overrides (highest priority)
        2. Symbol-specific overrides
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_symbol_config(symbol))

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_config(
        self,
        symbol: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> DefaultConfig:
        """
        Merge and validate configuration for a symbol.

        Raises:
            ValueError: If the merged configuration fails validation or
                contains unknown keys
        """
        merged = self.merge_config(symbol, overrides)

        errors = ConfigValidator.validate_config(merged)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise ValueError(f"Invalid configuration for {symbol}: {'; '.join(error_msgs)}")

        sections = {}
        for name, params_cls in SECTIONS.items():
            try:
                sections[name] = params_cls(**merged.get(name, {}))
            except TypeError as e:
                raise ValueError(f"Invalid '{name}' configuration for {symbol}: {e}") from e

        return DefaultConfig(**sections)

    def load_risk_config(self, filename: str = "risk.yaml") -> RiskConfig:
        """
        Load account risk settings from the 'account' section of a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the settings fail validation
        """
        path = self.config_dir / filename
        if not path.exists():
            raise FileNotFoundError(f"Risk configuration not found: {path}")

        settings = self._load_yaml(filename).get("account", {})
        risk_config = RiskConfig.from_settings(settings)

        errors = ConfigValidator.validate_risk_config({
            "risk_per_trade_pct": risk_config.risk_per_trade_pct,
            "daily_stop_loss_pct": risk_config.daily_stop_loss_pct,
            "max_positions": risk_config.max_positions,
            "capital": risk_config.capital,
        })
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise ValueError(f"Invalid risk configuration: {'; '.join(error_msgs)}")

        return risk_config

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
