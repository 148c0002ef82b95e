"""Unit tests for the signal pipeline coordinator."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from regime_app.data.models import PricePoint
from regime_app.delivery.memory_sink import MemorySnapshotSink
from regime_app.errors import (
    DeliveryError,
    ErrorKind,
    InsufficientDataError,
    OutOfOrderTimestampError,
)
from regime_app.models.orders import OrderProposal
from regime_app.models.regime import Regime
from regime_app.pipeline import SignalPipeline
from regime_app.state.models import PipelineState

RISING = [100.0 + i for i in range(25)]


def feed(pipeline, points):
    results = []
    for point in points:
        results.append(pipeline.on_price(point))
    return results


class TestLifecycle:
    """Test EMPTY -> WARMING -> READY transitions."""

    def test_unknown_symbol_is_empty(self, pipeline):
        assert pipeline.get_state("BTCUSD") == PipelineState.EMPTY
        assert pipeline.get_snapshot("BTCUSD") is None
        assert pipeline.get_regime("BTCUSD") is None
        assert pipeline.get_series_points("BTCUSD") == []
        assert pipeline.symbols() == []

    def test_warming_until_twenty_points(self, pipeline, make_points):
        points = make_points(RISING[:20])

        for point in points[:19]:
            assert pipeline.append(point) == PipelineState.WARMING

        with pytest.raises(InsufficientDataError) as exc_info:
            pipeline.recompute("BTCUSD")
        assert exc_info.value.kind == ErrorKind.INSUFFICIENT_DATA
        assert exc_info.value.available_count == 19
        assert exc_info.value.required_count == 20

        assert pipeline.append(points[19]) == PipelineState.READY

    def test_recompute_unknown_symbol(self, pipeline):
        with pytest.raises(InsufficientDataError):
            pipeline.recompute("DOGEUSD")

    def test_on_price_returns_none_while_warming(self, pipeline, make_points):
        results = feed(pipeline, make_points(RISING[:20]))

        assert all(result is None for result in results[:19])
        snapshot, regime = results[19]
        assert snapshot.symbol == "BTCUSD"
        assert regime.symbol == "BTCUSD"
        assert pipeline.get_snapshot("BTCUSD") is snapshot
        assert pipeline.get_regime("BTCUSD") is regime

    def test_ready_is_sticky_across_eviction(self, pipeline, make_points):
        feed(pipeline, make_points([100.0 + (i % 7) for i in range(120)]))

        assert pipeline.get_state("BTCUSD") == PipelineState.READY
        assert len(pipeline.get_series_points("BTCUSD")) == 50

    def test_capacity_below_indicator_window_rejected(self, empty_config_dir, make_points):
        pipeline = SignalPipeline(
            config_dir=empty_config_dir,
            overrides={"series": {"capacity": 15, "warmup_points": 10}},
        )
        with pytest.raises(ValueError):
            pipeline.append(make_points([100.0])[0])


class TestRecompute:
    """Test snapshot and regime derivation."""

    def test_rising_prices_trend_or_high_volatility(self, pipeline, make_points):
        snapshot, regime = feed(pipeline, make_points(RISING))[-1]

        assert snapshot.macd > 0
        # monotonic rise saturates RSI, which blocks the trend rule
        assert snapshot.rsi == 100.0
        assert regime.regime == Regime.HIGH_VOLATILITY

    def test_trend_regime(self, pipeline, make_points):
        # rise with periodic pullbacks keeps RSI below 70
        prices = []
        price = 100.0
        for i in range(30):
            price += -1.0 if i % 3 == 2 else 1.0
            prices.append(price)

        snapshot, regime = feed(pipeline, make_points(prices))[-1]

        assert snapshot.macd > 0
        assert snapshot.rsi < 70
        assert regime.regime == Regime.TREND

    def test_constant_prices(self, pipeline, make_points):
        snapshot, regime = feed(pipeline, make_points([100.0] * 20))[-1]

        assert snapshot.rsi == 100.0
        assert snapshot.macd == pytest.approx(0.0)
        assert regime.regime == Regime.HIGH_VOLATILITY

    def test_snapshot_uses_market_time(self, pipeline, make_points, base_time):
        snapshot, regime = feed(pipeline, make_points(RISING[:20]))[-1]

        assert snapshot.computed_at == base_time + timedelta(minutes=19)
        assert regime.computed_at == snapshot.computed_at

    def test_recompute_is_deterministic(self, pipeline, make_points):
        feed(pipeline, make_points(RISING))
        first = pipeline.recompute("BTCUSD")
        second = pipeline.recompute("BTCUSD")

        assert first == second

    def test_out_of_order_leaves_state_untouched(self, pipeline, make_points, base_time):
        feed(pipeline, make_points(RISING[:20]))
        before = pipeline.get_snapshot("BTCUSD")

        stale = PricePoint(symbol="BTCUSD", price=1.0, volume=1.0, timestamp=base_time)
        with pytest.raises(OutOfOrderTimestampError):
            pipeline.on_price(stale)

        assert pipeline.get_snapshot("BTCUSD") is before
        assert len(pipeline.get_series_points("BTCUSD")) == 20

    def test_symbols_are_independent(self, pipeline, make_points):
        feed(pipeline, make_points(RISING[:20], symbol="BTCUSD"))
        feed(pipeline, make_points(RISING[:5], symbol="ETHUSD"))

        assert pipeline.symbols() == ["BTCUSD", "ETHUSD"]
        assert pipeline.get_state("BTCUSD") == PipelineState.READY
        assert pipeline.get_state("ETHUSD") == PipelineState.WARMING


class TestEvaluate:
    """Test order proposal evaluation through the pipeline."""

    def test_evaluate_requires_ready(self, pipeline, make_points, sample_proposal, risk_config):
        feed(pipeline, make_points(RISING[:10]))

        with pytest.raises(InsufficientDataError):
            pipeline.evaluate(sample_proposal, risk_config)

    def test_evaluate_unknown_symbol(self, pipeline, sample_proposal, risk_config):
        with pytest.raises(InsufficientDataError):
            pipeline.evaluate(sample_proposal, risk_config)

    def test_evaluate_after_append_only(self, pipeline, make_points, sample_proposal, risk_config):
        """Regime is computed on first evaluate when only append() was used."""
        for point in make_points(RISING[:20]):
            pipeline.append(point)
        assert pipeline.get_regime("BTCUSD") is None

        decision = pipeline.evaluate(sample_proposal, risk_config)

        assert decision.accepted is True
        assert decision.position_size == pytest.approx(0.002)
        assert pipeline.get_regime("BTCUSD") is not None

    def test_evaluate_rejections(self, pipeline, make_points, risk_config):
        feed(pipeline, make_points(RISING[:20]))

        bad_quantity = OrderProposal(symbol="BTCUSD", quantity=-1, risk_amount=100, price=50000)
        too_risky = OrderProposal(symbol="BTCUSD", quantity=1, risk_amount=10000, price=50000)

        assert pipeline.evaluate(bad_quantity, risk_config).reason == ErrorKind.INVALID_QUANTITY
        assert pipeline.evaluate(too_risky, risk_config).reason == ErrorKind.RISK_EXCEEDED

    def test_evaluate_open_positions(self, pipeline, make_points, sample_proposal, risk_config):
        feed(pipeline, make_points(RISING[:20]))

        decision = pipeline.evaluate(sample_proposal, risk_config, open_positions=3)
        assert decision.reason == ErrorKind.MAX_POSITIONS_REACHED

    def test_high_volatility_haircut_from_overrides(self, empty_config_dir, make_points,
                                                    sample_proposal, risk_config):
        pipeline = SignalPipeline(
            config_dir=empty_config_dir,
            overrides={"risk": {"high_volatility_haircut": 0.5}},
        )
        # flat prices classify as high_volatility
        feed(pipeline, make_points([50000.0] * 20))

        decision = pipeline.evaluate(sample_proposal, risk_config)
        assert decision.position_size == pytest.approx(0.001)


class TestSinks:
    """Test snapshot delivery."""

    def test_memory_sink_receives_every_recompute(self, empty_config_dir, make_points):
        sink = MemorySnapshotSink()
        pipeline = SignalPipeline(config_dir=empty_config_dir, sinks=[sink])

        feed(pipeline, make_points(RISING))

        assert len(sink.history) == 6
        latest = sink.get_latest("BTCUSD")
        assert latest["indicators"]["symbol"] == "BTCUSD"
        assert latest["regime"]["regime"] == pipeline.get_regime("BTCUSD").regime.value
        assert sink.get_stats()["delivery_count"] == 6

    def test_sink_failure_raises_delivery_error(self, empty_config_dir, make_points):
        sink = MemorySnapshotSink(name="flaky")
        sink.publish = Mock(side_effect=ConnectionError("database unavailable"))
        pipeline = SignalPipeline(config_dir=empty_config_dir, sinks=[sink])

        points = make_points(RISING[:20])
        feed(pipeline, points[:19])

        with pytest.raises(DeliveryError) as exc_info:
            pipeline.on_price(points[19])

        assert exc_info.value.sink_name == "flaky"
        assert exc_info.value.symbol == "BTCUSD"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        # the snapshot was stored before delivery
        assert pipeline.get_snapshot("BTCUSD") is not None
        assert sink.get_stats()["error_count"] == 1

    def test_failing_sink_does_not_starve_later_sinks(self, empty_config_dir, make_points):
        failing = MemorySnapshotSink(name="failing")
        failing.publish = Mock(side_effect=ConnectionError("database unavailable"))
        healthy = MemorySnapshotSink(name="healthy")
        pipeline = SignalPipeline(config_dir=empty_config_dir, sinks=[failing, healthy])

        points = make_points(RISING[:20])
        feed(pipeline, points[:19])

        with pytest.raises(DeliveryError) as exc_info:
            pipeline.on_price(points[19])

        assert exc_info.value.sink_name == "failing"
        assert healthy.get_stats()["delivery_count"] == 1
        assert healthy.get_latest("BTCUSD") is not None

    def test_every_failed_sink_is_named(self, empty_config_dir, make_points):
        first = MemorySnapshotSink(name="first")
        first.publish = Mock(side_effect=ConnectionError("down"))
        second = MemorySnapshotSink(name="second")
        second.publish = Mock(side_effect=TimeoutError("slow"))
        healthy = MemorySnapshotSink(name="healthy")
        pipeline = SignalPipeline(config_dir=empty_config_dir, sinks=[first, second, healthy])

        points = make_points(RISING[:20])
        feed(pipeline, points[:19])

        with pytest.raises(DeliveryError) as exc_info:
            pipeline.on_price(points[19])

        assert exc_info.value.context["failed_sinks"] == ["first", "second"]
        assert exc_info.value.symbol == "BTCUSD"
        assert isinstance(exc_info.value.__cause__, DeliveryError)
        assert healthy.get_stats()["delivery_count"] == 1

    def test_evaluate_does_not_publish(self, empty_config_dir, make_points,
                                       sample_proposal, risk_config):
        """A regime computed for an order check never goes through the sinks."""
        failing = MemorySnapshotSink(name="failing")
        failing.publish = Mock(side_effect=ConnectionError("database unavailable"))
        pipeline = SignalPipeline(config_dir=empty_config_dir, sinks=[failing])

        for point in make_points(RISING[:20]):
            pipeline.append(point)

        decision = pipeline.evaluate(sample_proposal, risk_config)

        assert decision.accepted is True
        assert decision.position_size == pytest.approx(0.002)
        assert pipeline.get_regime("BTCUSD") is not None
        failing.publish.assert_not_called()
