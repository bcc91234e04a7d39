from __future__ import annotations

import math
import threading
from dataclasses import dataclass

MIB = 1024 * 1024

DEFAULT_CPU = 25.0
DEFAULT_MEMORY = 100 * MIB
STRESS_CPU = 85.0

CPU_MIN = 0.0
CPU_MAX = 100.0


class SimulationError(Exception):
    """Base class for errors raised while mutating the simulated state."""


class ValidationError(SimulationError):
    """Raised when a requested value is malformed or out of range."""


@dataclass(frozen=True)
class StateSnapshot:
    cpu: float
    memory: int
    healthy: bool

    @property
    def memory_mb(self) -> int:
        # half-up rounding, whole MiB
        return int(math.floor(self.memory / MIB + 0.5))


def parse_number(raw: str) -> float:
    """Parse a path parameter into a finite float, or raise ValueError."""
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {raw!r}")
    # adding 0.0 turns -0.0 into 0.0
    return value + 0.0


class SimulatedState:
    """Fabricated CPU, memory and health telemetry shared by handlers and the sampler.

    Every read and write holds the same lock, so concurrent requests never
    interleave partial updates and readers always get a consistent snapshot.
    """

    def __init__(
        self,
        cpu: float = DEFAULT_CPU,
        memory: int = DEFAULT_MEMORY,
        healthy: bool = True,
    ) -> None:
        self._lock = threading.Lock()
        self._cpu = float(cpu)
        self._memory = int(memory)
        self._healthy = healthy

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(cpu=self._cpu, memory=self._memory, healthy=self._healthy)

    def set_cpu(self, raw: str) -> float:
        try:
            value = parse_number(raw)
        except ValueError as exc:
            raise ValidationError("CPU value must be between 0 and 100") from exc
        if value < CPU_MIN or value > CPU_MAX:
            raise ValidationError("CPU value must be between 0 and 100")
        with self._lock:
            self._cpu = value
            return self._cpu

    def set_memory_mb(self, raw: str) -> float:
        """Store ``raw`` megabytes as bytes; returns the accepted megabyte value."""
        try:
            value = parse_number(raw)
        except ValueError as exc:
            raise ValidationError("Memory value must be positive") from exc
        if value < 0:
            raise ValidationError("Memory value must be positive")
        memory = value * MIB
        if not math.isfinite(memory):
            raise ValidationError("Memory value must be positive")
        with self._lock:
            self._memory = int(round(memory))
        return value

    def stress(self) -> StateSnapshot:
        with self._lock:
            self._cpu = STRESS_CPU
            return StateSnapshot(cpu=self._cpu, memory=self._memory, healthy=self._healthy)

    def reset(self) -> StateSnapshot:
        with self._lock:
            self._cpu = DEFAULT_CPU
            self._memory = DEFAULT_MEMORY
            self._healthy = True
            return StateSnapshot(cpu=self._cpu, memory=self._memory, healthy=self._healthy)

    def mark_unhealthy(self) -> StateSnapshot:
        with self._lock:
            self._healthy = False
            return StateSnapshot(cpu=self._cpu, memory=self._memory, healthy=self._healthy)
