"""
Signal pipeline coordinator.

Orchestrates the per-symbol analysis pipeline:
Price tick → PriceSeries → Indicators → Regime → (on demand) Risk gate
"""

import threading
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import structlog

from .config.loader import ConfigLoader
from .data.models import PricePoint, PriceSeries
from .delivery.base import BaseSnapshotSink
from .errors import DeliveryError, InsufficientDataError
from .indicators.calculator import IndicatorCalculator
from .logging.config import get_state_logger, log_state_transition
from .models.indicators import IndicatorSnapshot
from .models.orders import OrderProposal, RiskConfig, RiskDecision
from .models.regime import RegimeState
from .regime.classifier import RegimeClassifier
from .risk.gate import RiskGate
from .state.models import PipelineState, SymbolRuntime
from .utils.time import get_market_time

logger = structlog.get_logger(__name__)
state_logger = get_state_logger(__name__)


class SignalPipeline:
    """
    Main coordinator for per-symbol indicator, regime and risk evaluation.

    Each symbol's series, snapshot and regime are updated under that
    symbol's lock, so "append then compute" is atomic per symbol. Symbols
    never share mutable state and may be driven from different threads.
    Errors from the series and the indicators propagate to the caller
    unchanged. Every sink is offered each snapshot before a sink failure
    is raised.
    """

    def __init__(
        self,
        config_dir: Optional[Union[str, Path]] = None,
        overrides: Optional[dict[str, Any]] = None,
        sinks: Optional[Iterable[BaseSnapshotSink]] = None,
    ) -> None:
        self.logger = logger
        self.state_logger = state_logger

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        self.overrides = overrides or {}
        self.sinks: list[BaseSnapshotSink] = list(sinks or [])

        self._runtimes: dict[str, SymbolRuntime] = {}
        self._registry_lock = threading.Lock()

        self.logger.info("Signal pipeline initialized", sinks=[s.name for s in self.sinks])

    def append(self, point: PricePoint) -> PipelineState:
        """
        Append a tick to its symbol's series without recomputing.

        Returns:
            The symbol's state after the append

        Raises:
            OutOfOrderTimestampError: tick older than the newest retained tick
        """
        runtime = self._get_or_create_runtime(point.symbol)
        with runtime.lock:
            self._append_locked(runtime, point)
            return runtime.state

    def recompute(self, symbol: str) -> tuple[IndicatorSnapshot, RegimeState]:
        """
        Recompute indicators and regime from the symbol's current window.

        Raises:
            InsufficientDataError: symbol is not READY
        """
        runtime = self._require_runtime(symbol)
        with runtime.lock:
            return self._recompute_locked(runtime)

    def on_price(self, point: PricePoint) -> Optional[tuple[IndicatorSnapshot, RegimeState]]:
        """
        Append a tick and, once the symbol is READY, recompute atomically.

        Returns:
            The new snapshot and regime, or None while the symbol is warming
        """
        runtime = self._get_or_create_runtime(point.symbol)
        with runtime.lock:
            self._append_locked(runtime, point)
            if runtime.state != PipelineState.READY:
                return None
            return self._recompute_locked(runtime)

    def evaluate(
        self,
        proposal: OrderProposal,
        risk_config: RiskConfig,
        open_positions: Optional[int] = None
    ) -> RiskDecision:
        """
        Run an order proposal through the risk gate with the symbol's regime.

        The regime is read under the symbol lock and the gate runs on that
        frozen copy after the lock is released. A regime computed here is
        stored but not published, so sink failures never reach the caller.

        Raises:
            InsufficientDataError: symbol is EMPTY or WARMING
        """
        runtime = self._require_runtime(proposal.symbol)
        with runtime.lock:
            if runtime.regime is None:
                self._recompute_locked(runtime, publish=False)
            regime = runtime.regime

        return runtime.gate.evaluate(proposal, risk_config, regime, open_positions)

    def get_state(self, symbol: str) -> PipelineState:
        runtime = self._runtimes.get(symbol)
        return runtime.state if runtime else PipelineState.EMPTY

    def get_snapshot(self, symbol: str) -> Optional[IndicatorSnapshot]:
        runtime = self._runtimes.get(symbol)
        return runtime.snapshot if runtime else None

    def get_regime(self, symbol: str) -> Optional[RegimeState]:
        runtime = self._runtimes.get(symbol)
        return runtime.regime if runtime else None

    def get_series_points(self, symbol: str) -> list[PricePoint]:
        runtime = self._runtimes.get(symbol)
        if runtime is None:
            return []
        with runtime.lock:
            return runtime.series.points()

    def symbols(self) -> list[str]:
        with self._registry_lock:
            return sorted(self._runtimes)

    def _get_or_create_runtime(self, symbol: str) -> SymbolRuntime:
        with self._registry_lock:
            runtime = self._runtimes.get(symbol)
            if runtime is None:
                runtime = self._create_runtime(symbol)
                self._runtimes[symbol] = runtime
            return runtime

    def _create_runtime(self, symbol: str) -> SymbolRuntime:
        config = self.config_loader.build_config(symbol, self.overrides)
        calculator = IndicatorCalculator(config.indicators)

        warmup_points = max(config.series.warmup_points, calculator.min_points)
        if warmup_points > config.series.capacity:
            raise ValueError(
                f"Series capacity {config.series.capacity} for {symbol} cannot hold "
                f"the {warmup_points} points indicators need"
            )

        runtime = SymbolRuntime(
            symbol=symbol,
            series=PriceSeries(symbol, capacity=config.series.capacity),
            calculator=calculator,
            classifier=RegimeClassifier(config.regime),
            gate=RiskGate(config.risk),
            warmup_points=warmup_points,
        )

        self.logger.info(
            "Created symbol runtime",
            symbol=symbol,
            capacity=config.series.capacity,
            warmup_points=warmup_points,
            min_increment=config.risk.min_increment
        )
        return runtime

    def _require_runtime(self, symbol: str) -> SymbolRuntime:
        runtime = self._runtimes.get(symbol)
        if runtime is None or runtime.state != PipelineState.READY:
            available = len(runtime.series) if runtime else 0
            required = runtime.warmup_points if runtime else None
            raise InsufficientDataError(
                f"{symbol} is not ready: {available} price points available",
                required_count=required,
                available_count=available,
                context={"symbol": symbol, "state": self.get_state(symbol).value}
            )
        return runtime

    def _append_locked(self, runtime: SymbolRuntime, point: PricePoint) -> None:
        runtime.series.append(point)

        new_state = runtime.next_state()
        if new_state != runtime.state:
            log_state_transition(
                self.state_logger,
                symbol=runtime.symbol,
                from_state=runtime.state.value,
                to_state=new_state.value,
                trigger="price_appended",
                context={"points": len(runtime.series)}
            )
            runtime.transition(new_state)

    def _recompute_locked(
        self,
        runtime: SymbolRuntime,
        publish: bool = True
    ) -> tuple[IndicatorSnapshot, RegimeState]:
        if runtime.state != PipelineState.READY:
            raise InsufficientDataError(
                f"{runtime.symbol} is not ready: {len(runtime.series)} price points available",
                required_count=runtime.warmup_points,
                available_count=len(runtime.series),
                context={"symbol": runtime.symbol, "state": runtime.state.value}
            )

        prices = runtime.series.window(runtime.series.capacity)
        computed_at = get_market_time(runtime.series.last_timestamp)

        snapshot = runtime.calculator.calculate(runtime.symbol, prices, computed_at)
        regime = runtime.classifier.classify(snapshot)

        previous = runtime.regime
        runtime.snapshot = snapshot
        runtime.regime = regime

        if previous is not None and previous.regime != regime.regime:
            self.logger.info(
                "Regime changed",
                symbol=runtime.symbol,
                from_regime=previous.regime.value,
                to_regime=regime.regime.value,
                rsi=snapshot.rsi,
                macd=snapshot.macd
            )

        self.logger.debug(
            "Recomputed indicators",
            symbol=runtime.symbol,
            window_size=len(prices),
            regime=regime.regime.value,
            rsi=snapshot.rsi,
            macd=snapshot.macd
        )

        if publish:
            self._publish(snapshot, regime)

        return snapshot, regime

    def _publish(self, snapshot: IndicatorSnapshot, regime: RegimeState) -> None:
        """
        Deliver to every sink, then raise if any of them failed.

        Raises:
            DeliveryError: one or more sinks failed; names every failed sink
        """
        failures: list[DeliveryError] = []
        for sink in self.sinks:
            try:
                sink.deliver(snapshot, regime)
            except DeliveryError as e:
                failures.append(e)

        if not failures:
            return
        if len(failures) == 1:
            raise failures[0]

        failed = [f.sink_name for f in failures]
        raise DeliveryError(
            f"Sinks {', '.join(failed)} failed for {snapshot.symbol}",
            sink_name=", ".join(failed),
            symbol=snapshot.symbol,
            context={"failed_sinks": failed}
        ) from failures[0]
