"""Default configuration parameters for the regime engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SeriesParams:
    """Rolling price series parameters."""
    capacity: int = 50                 # Ring buffer size per symbol
    warmup_points: int = 20            # Points before a symbol is READY


@dataclass(frozen=True)
class IndicatorParams:
    """Indicator periods."""
    sma_period: int = 20
    ema_fast: int = 12
    ema_slow: int = 26
    rsi_period: int = 14
    bollinger_period: int = 20
    bollinger_std: float = 2.0


@dataclass(frozen=True)
class RegimeParams:
    """Regime rule thresholds and the outputs assigned to each regime."""
    rsi_overbought: float = 70.0
    rsi_oversold: float = 30.0

    trend_strength: float = 0.7
    trend_confidence: float = 0.8
    high_volatility_confidence: float = 0.75
    range_confidence: float = 0.5

    baseline_volatility: float = 0.02
    high_volatility: float = 0.05


@dataclass(frozen=True)
class RiskParams:
    """Order sizing parameters."""
    min_increment: float = 1e-8                # Instrument quantity step
    high_volatility_haircut: float = 0.0       # Fraction removed in high_volatility


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    series: SeriesParams
    indicators: IndicatorParams
    regime: RegimeParams
    risk: RiskParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        series=SeriesParams(),
        indicators=IndicatorParams(),
        regime=RegimeParams(),
        risk=RiskParams(),
    )
