"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Sequence

import pytest

from regime_app.data.models import PricePoint
from regime_app.models.orders import OrderProposal, OrderSide, RiskConfig
from regime_app.pipeline import SignalPipeline

BASE_TIME = datetime(2025, 8, 16, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def make_points() -> Callable[..., List[PricePoint]]:
    """Factory building one-minute PricePoints from a list of prices."""

    def _make(prices: Sequence[float], symbol: str = "BTCUSD",
              start: datetime = BASE_TIME, volume: float = 10.0) -> List[PricePoint]:
        return [
            PricePoint(
                symbol=symbol,
                price=float(price),
                volume=volume,
                timestamp=start + timedelta(minutes=i),
            )
            for i, price in enumerate(prices)
        ]

    return _make


@pytest.fixture
def risk_config() -> RiskConfig:
    """Account settings: 10k capital, 5% daily stop -> 500 risk limit."""
    return RiskConfig(
        risk_per_trade_pct=1.0,
        daily_stop_loss_pct=5.0,
        max_positions=3,
        capital=10000.0,
    )


@pytest.fixture
def sample_proposal() -> OrderProposal:
    return OrderProposal(
        symbol="BTCUSD",
        quantity=0.1,
        risk_amount=100,
        price=50000,
        side=OrderSide.BUY,
    )


@pytest.fixture
def empty_config_dir(tmp_path):
    """Config directory without symbol overrides so defaults apply."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def pipeline(empty_config_dir) -> SignalPipeline:
    return SignalPipeline(config_dir=empty_config_dir)
