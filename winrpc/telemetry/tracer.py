"""
OpenTelemetry Trace Context Management

Provides span creation and W3C trace context injection/extraction so that a
client span and the server-side dispatch span share one trace.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from opentelemetry import context as otel_context
from opentelemetry import propagate, trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter
)
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

logger = logging.getLogger(__name__)


def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317", exporter: str = "otlp"):
    """Configure OpenTelemetry tracer

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        exporter: "otlp" or "console"

    Returns:
        Tracer: Tracer for the service
    """
    if exporter == "otlp":
        span_exporter = OTLPSpanExporter(endpoint=otlp_endpoint)
    elif exporter == "console":
        span_exporter = ConsoleSpanExporter()
    else:
        raise ValueError(f"Unsupported trace exporter: {exporter}")

    provider = TracerProvider(
        sampler=ALWAYS_ON,
        resource=Resource.create({"service.name": service_name})
    )
    provider.add_span_processor(BatchSpanProcessor(span_exporter))

    # Set global TracerProvider
    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(service_name)

    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, exporter: {exporter}")

    return tracer


def inject_trace_context() -> Dict[str, str]:
    """Write the current trace context into a header dictionary

    Returns:
        Dict[str, str]: W3C traceparent/tracestate headers, empty if there is
            no active span
    """
    carrier: Dict[str, str] = {}
    propagate.inject(carrier)
    return carrier


def extract_trace_context(carrier: Optional[Mapping[str, Any]]) -> Optional[otel_context.Context]:
    """Read a trace context from request headers

    Args:
        carrier: Request headers, matched case-insensitively

    Returns:
        Context: Extracted context, or None when the carrier holds none
    """
    if not carrier:
        return None

    headers = {str(key).lower(): value for key, value in carrier.items()}
    if "traceparent" not in headers:
        return None

    return propagate.extract(headers)


@contextmanager
def with_trace_context(ctx: Optional[otel_context.Context]) -> Iterator[None]:
    """Use the given context as the current one for the duration of the block

    Args:
        ctx: Context returned by extract_trace_context, or None

    Yields:
        None, used as context manager
    """
    if ctx is None:
        yield
        return

    token = otel_context.attach(ctx)
    try:
        yield
    finally:
        otel_context.detach(token)


def create_span(name: str, attributes: Dict[str, Any] = None, kind: trace.SpanKind = trace.SpanKind.INTERNAL):
    """Create new span

    Args:
        name: Span name
        attributes: Span attributes
        kind: Span kind

    Returns:
        Span context manager
    """
    tracer = trace.get_tracer(__name__)
    return tracer.start_as_current_span(
        name,
        attributes=attributes or {},
        kind=kind,
    )
