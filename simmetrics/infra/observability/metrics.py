from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from prometheus_client.registry import Collector

# Label names shared by the latency histogram and the request counter.
# The route label carries the route template (e.g. /set-cpu/{value}), not the raw path.
HTTP_LABELS = ("method", "route", "status_code")


class DuplicateNameError(ValueError):
    """Raised when a collector exposes a series name that is already registered."""


class MetricsRegistry:
    """Owns the collectors of one application and renders the text exposition."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, *, default_process_metrics: bool = False) -> None:
        # auto_describe lets the registry see names of collectors without describe()
        self._registry = CollectorRegistry(auto_describe=True)
        if default_process_metrics:
            self._register_default_collectors()

    def _register_default_collectors(self) -> None:
        # GCCollector registers itself unconditionally, so every default
        # collector is handed the wrapped registry instead of registry=None
        try:
            ProcessCollector(registry=self._registry)
            PlatformCollector(registry=self._registry)
            GCCollector(registry=self._registry)
        except ValueError as exc:
            raise DuplicateNameError(str(exc)) from exc

    @property
    def collector_registry(self) -> CollectorRegistry:
        return self._registry

    def register(self, collector: Collector) -> Collector:
        try:
            self._registry.register(collector)
        except ValueError as exc:
            raise DuplicateNameError(str(exc)) from exc
        return collector

    def snapshot(self) -> str:
        """Serialize every registered collector, in registration order."""
        return generate_latest(self._registry).decode("utf-8")

    def sample_value(self, name: str, labels: dict[str, str] | None = None) -> float | None:
        return self._registry.get_sample_value(name, labels or {})


@dataclass(frozen=True)
class AppInstruments:
    cpu_usage: Gauge
    memory_usage: Gauge
    health_status: Gauge
    request_duration: Histogram
    requests_total: Counter


def build_instruments(registry: MetricsRegistry) -> AppInstruments:
    cpu_usage = Gauge(
        "app_cpu_usage_percent",
        "Current CPU usage percentage",
        registry=None,
    )
    memory_usage = Gauge(
        "app_memory_usage_bytes",
        "Current memory usage in bytes",
        registry=None,
    )
    health_status = Gauge(
        "app_health_status",
        "Application health status (1 = healthy, 0 = unhealthy)",
        registry=None,
    )
    request_duration = Histogram(
        "http_request_duration_seconds",
        "Duration of HTTP requests in seconds",
        HTTP_LABELS,
        registry=None,
    )
    requests_total = Counter(
        "http_requests_total",
        "Total number of HTTP requests",
        HTTP_LABELS,
        registry=None,
    )
    for instrument in (
        cpu_usage,
        memory_usage,
        health_status,
        request_duration,
        requests_total,
    ):
        registry.register(instrument)
    return AppInstruments(
        cpu_usage=cpu_usage,
        memory_usage=memory_usage,
        health_status=health_status,
        request_duration=request_duration,
        requests_total=requests_total,
    )
