from __future__ import annotations

from dataclasses import dataclass

from simmetrics.common.config import Settings
from simmetrics.domain import SimulatedState
from simmetrics.infra.observability.metrics import (
    AppInstruments,
    MetricsRegistry,
    build_instruments,
)

from .sampler import MetricsSampler


@dataclass
class AppContext:
    """Everything one application instance shares between handlers and the sampler."""

    settings: Settings
    state: SimulatedState
    registry: MetricsRegistry
    instruments: AppInstruments
    sampler: MetricsSampler


def build_context(settings: Settings) -> AppContext:
    registry = MetricsRegistry(
        default_process_metrics=settings.DEFAULT_PROCESS_METRICS
    )
    instruments = build_instruments(registry)
    state = SimulatedState()
    sampler = MetricsSampler(
        state,
        instruments,
        interval=settings.SAMPLE_INTERVAL_SECONDS,
    )
    return AppContext(
        settings=settings,
        state=state,
        registry=registry,
        instruments=instruments,
        sampler=sampler,
    )
