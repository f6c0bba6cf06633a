"""
OpenTelemetry Integration Module

Provides distributed tracing and metrics collection capabilities:
- tracer: Span creation and W3C trace context propagation
- metrics: Counters, latency histograms and gauges

Nothing is exported until setup_tracer / setup_metrics install SDK providers;
before that every call goes to the OpenTelemetry no-op implementations.
"""

from .tracer import (
    setup_tracer,
    inject_trace_context,
    extract_trace_context,
    with_trace_context,
    create_span
)
from .metrics import (
    setup_metrics,
    increment_counter,
    record_latency,
    add_gauge_callback
)

__all__ = [
    "setup_tracer",
    "inject_trace_context",
    "extract_trace_context",
    "with_trace_context",
    "create_span",
    "setup_metrics",
    "increment_counter",
    "record_latency",
    "add_gauge_callback"
]
