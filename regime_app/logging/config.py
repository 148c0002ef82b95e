"""
structlog setup and the bound loggers used for risk gate decisions and
per-symbol pipeline state transitions.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(level: str = "INFO", format_json: bool = False) -> None:
    """
    Configure structlog on top of stdlib logging for the whole engine.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Render JSON lines instead of the console format
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        stream=sys.stdout,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if format_json else structlog.dev.ConsoleRenderer(colors=True),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Module logger; pass __name__."""
    return structlog.get_logger(name)


def get_gating_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for risk gate decisions."""
    return get_logger(name).bind(
        subsystem="risk_gate",
        audit_trail=True
    )


def get_state_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for per-symbol pipeline state transitions."""
    return get_logger(name).bind(
        subsystem="signal_pipeline",
        audit_trail=True
    )


def log_gate_decision(
    logger: FilteringBoundLogger,
    symbol: str,
    accepted: bool,
    reason: Optional[str],
    position_size: Optional[float] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a risk gate decision with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol of the evaluated proposal
        accepted: Whether the proposal was accepted
        reason: ErrorKind value for rejections, None when accepted
        position_size: Final position size for accepted proposals
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        gate_result="PASS" if accepted else "FAIL",
        reason=reason,
        position_size=position_size,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if accepted:
        bound_logger.info("Order proposal accepted")
    else:
        bound_logger.warning("Order proposal rejected")


def log_state_transition(
    logger: FilteringBoundLogger,
    symbol: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a pipeline state transition with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol transitioning
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
