"""Tests for logging of gate decisions and pipeline state transitions."""

import json
import logging
from unittest.mock import Mock

import pytest

from regime_app.logging.config import (
    configure_logging,
    get_gating_logger,
    get_state_logger,
    log_gate_decision,
    log_state_transition,
)
from regime_app.models.orders import OrderProposal
from regime_app.risk.gate import RiskGate


def make_mock_logger():
    """Logger whose bind() chain always returns the same bound mock."""
    logger = Mock()
    bound = Mock()
    logger.bind.return_value = bound
    bound.bind.return_value = bound
    return logger, bound


class TestLoggingIntegration:
    """Test logging integration for gate decisions and state transitions."""

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True)

    def test_accepted_decision_logged_at_info(self, risk_config, sample_proposal):
        logger, bound = make_mock_logger()
        gate = RiskGate()
        gate.logger = logger

        gate.evaluate(sample_proposal, risk_config, None)

        kwargs = logger.bind.call_args.kwargs
        assert kwargs["symbol"] == "BTCUSD"
        assert kwargs["gate_result"] == "PASS"
        assert kwargs["reason"] is None
        assert kwargs["position_size"] == pytest.approx(0.002)
        bound.info.assert_called_once_with("Order proposal accepted")
        bound.warning.assert_not_called()

    def test_rejected_decision_logged_at_warning(self, risk_config):
        logger, bound = make_mock_logger()
        gate = RiskGate()
        gate.logger = logger

        gate.evaluate(OrderProposal(symbol="ETHUSD", quantity=-1, risk_amount=10, price=3000),
                      risk_config, None)

        kwargs = logger.bind.call_args.kwargs
        assert kwargs["gate_result"] == "FAIL"
        assert kwargs["reason"] == "InvalidQuantity"
        bound.warning.assert_called_once_with("Order proposal rejected")

    def test_pipeline_state_transitions(self, pipeline, make_points):
        logger, bound = make_mock_logger()
        pipeline.state_logger = logger

        for point in make_points([100.0 + i for i in range(21)]):
            pipeline.append(point)

        transitions = [
            (c.kwargs["from_state"], c.kwargs["to_state"])
            for c in logger.bind.call_args_list
        ]
        assert transitions == [("empty", "warming"), ("warming", "ready")]
        assert bound.info.call_count == 2

    def test_log_helpers_bind_context(self):
        logger, bound = make_mock_logger()

        log_state_transition(logger, "BTCUSD", "warming", "ready", "price_appended",
                             context={"points": 20})
        bound.bind.assert_called_once_with(context={"points": 20})

        logger, bound = make_mock_logger()
        log_gate_decision(logger, "BTCUSD", accepted=False, reason="RiskExceeded")
        bound.bind.assert_not_called()
        bound.warning.assert_called_once()

    def test_real_loggers_bind_subsystem(self, caplog):
        with caplog.at_level(logging.INFO):
            log_gate_decision(get_gating_logger("test"), "BTCUSD", accepted=True, reason=None,
                              position_size=0.5)
            log_state_transition(get_state_logger("test"), "BTCUSD", "empty", "warming",
                                 "price_appended")

        assert "risk_gate" in caplog.text
        assert "signal_pipeline" in caplog.text

    def test_json_rendering(self, caplog):
        configure_logging(level="INFO", format_json=True)

        with caplog.at_level(logging.INFO):
            log_gate_decision(get_gating_logger("json-test"), "ETHUSD", accepted=False,
                              reason="InvalidPrice")

        record = json.loads(caplog.records[-1].getMessage())
        assert record["event"] == "Order proposal rejected"
        assert record["reason"] == "InvalidPrice"
        assert record["level"] == "warning"
        assert "timestamp" in record
