from __future__ import annotations

import asyncio
import logging

from simmetrics.domain import SimulatedState
from simmetrics.infra.observability.metrics import AppInstruments

logger = logging.getLogger(__name__)


class MetricsSampler:
    """Copies the simulated state into the telemetry gauges on a fixed interval."""

    def __init__(
        self,
        state: SimulatedState,
        instruments: AppInstruments,
        interval: float = 1.0,
    ) -> None:
        self._state = state
        self._instruments = instruments
        self._interval = interval
        self._task: asyncio.Task | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sample_once(self) -> None:
        snapshot = self._state.snapshot()
        self._instruments.cpu_usage.set(snapshot.cpu)
        self._instruments.memory_usage.set(snapshot.memory)
        self._instruments.health_status.set(1 if snapshot.healthy else 0)

    def start(self) -> None:
        """Spawn the sampling task on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="metrics-sampler")
        logger.debug("metrics sampler started interval=%s", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("metrics sampler stopped")

    async def _run(self) -> None:
        while True:
            self.sample_once()
            await asyncio.sleep(self._interval)
