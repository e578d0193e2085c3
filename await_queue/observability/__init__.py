"""
Logging, metrics and tracing setup shared by every sequencer.
"""

from await_queue.observability.logging import setup_logging
from await_queue.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from await_queue.observability.tracing import get_tracer, setup_tracing

__all__ = [
    "setup_logging",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
]
