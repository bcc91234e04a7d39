"""
Domain layer package holding the simulated telemetry and its validation rules.
"""

from .state import (
    DEFAULT_CPU,
    DEFAULT_MEMORY,
    MIB,
    STRESS_CPU,
    SimulatedState,
    SimulationError,
    StateSnapshot,
    ValidationError,
)

__all__ = [
    "DEFAULT_CPU",
    "DEFAULT_MEMORY",
    "MIB",
    "STRESS_CPU",
    "SimulatedState",
    "SimulationError",
    "StateSnapshot",
    "ValidationError",
]
