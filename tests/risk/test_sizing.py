"""Tests for capital-based position sizing"""

import pytest

from regime_app.risk.sizing import PositionSizer, SizingInputs, SizingMethod


@pytest.fixture
def sizer():
    return PositionSizer()


def inputs(**overrides):
    values = dict(symbol="BTCUSD", capital=10000.0, risk_per_trade=0.01)
    values.update(overrides)
    return SizingInputs(**values)


class TestPositionSizer:

    def test_kelly_with_default_statistics(self, sizer):
        rec = sizer.calculate("kelly", inputs())

        # b = 1.5, p = 0.6 -> f = (0.9 - 0.4) / 1.5 = 1/3, quarter Kelly = 1/12
        assert rec.method == SizingMethod.KELLY
        assert rec.extras["kelly_fraction"] == pytest.approx(1 / 3)
        assert rec.recommended_size == pytest.approx(10000 * (1 / 12) * 0.01)
        assert rec.max_size == pytest.approx(1000.0)
        assert rec.confidence_level == 0.95

    def test_kelly_negative_edge_sizes_zero(self, sizer):
        rec = sizer.kelly(inputs(win_rate=0.2, avg_win=1.0, avg_loss=1.0))
        assert rec.recommended_size == 0.0

    def test_fixed_percentage(self, sizer):
        rec = sizer.calculate("fixed_percentage", inputs(risk_per_trade=0.02))

        assert rec.recommended_size == pytest.approx(200.0)
        assert rec.max_size == pytest.approx(1500.0)
        assert rec.risk_score == pytest.approx(0.54)

    def test_fixed_percentage_capped(self, sizer):
        rec = sizer.fixed_percentage(inputs(risk_per_trade=0.5))
        assert rec.recommended_size == pytest.approx(rec.max_size)

    def test_volatility_adjusted_scales_inversely(self, sizer):
        calm = sizer.volatility_adjusted(inputs(volatility=0.005))
        wild = sizer.volatility_adjusted(inputs(volatility=0.04))

        assert calm.extras["volatility_adjustment"] == pytest.approx(2.0)
        assert wild.extras["volatility_adjustment"] == pytest.approx(0.5)
        assert calm.recommended_size == pytest.approx(200.0)
        assert wild.recommended_size == pytest.approx(50.0)

    def test_risk_parity(self, sizer):
        rec = sizer.calculate("risk_parity", inputs())

        assert rec.recommended_size == pytest.approx(100.0)
        assert rec.max_size == pytest.approx(800.0)
        assert rec.extras["target_risk_contribution"] == 0.05

    def test_unknown_method_falls_back(self, sizer):
        rec = sizer.calculate("martingale", inputs())
        assert rec.method == SizingMethod.FIXED_PERCENTAGE

    def test_risk_score_bounds(self):
        risky = PositionSizer.risk_score(0.5, inputs(volatility=0.2))
        safe = PositionSizer.risk_score(0.0, inputs(win_rate=1.0))

        assert risky == 0.9
        assert 0.1 <= safe < 0.5
