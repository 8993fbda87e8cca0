"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from turn_dispatch.observability.logging import bind_context, clear_context, setup_logging
from turn_dispatch.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from turn_dispatch.observability.tracing import (
    get_tracer,
    set_ticket_attributes,
    setup_tracing,
)

__all__ = [
    "setup_logging",
    "bind_context",
    "clear_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
    "set_ticket_attributes",
]
