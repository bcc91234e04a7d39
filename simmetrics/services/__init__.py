from .context import AppContext, build_context
from .sampler import MetricsSampler

__all__ = [
    "AppContext",
    "MetricsSampler",
    "build_context",
]
