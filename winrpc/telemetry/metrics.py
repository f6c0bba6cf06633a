"""
OpenTelemetry Metrics Collection

Provides functionality for collecting and exporting metrics to monitor request
throughput, dispatch outcomes and the number of live windows.
"""

import logging
import threading
from typing import Any, Callable, Dict, Iterable

from opentelemetry import metrics
from opentelemetry.metrics import CallbackOptions, Observation
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    PeriodicExportingMetricReader
)
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

logger = logging.getLogger(__name__)

# Instruments are created once and shared by every request thread
_instruments_lock = threading.Lock()
_counters = {}
_histograms = {}

GaugeCallback = Callable[[CallbackOptions], Iterable[Observation]]


def setup_metrics(service_name: str,
                  otlp_endpoint: str = "localhost:4317",
                  export_interval_ms: int = 5000,
                  exporter: str = "otlp"):
    """Configure OpenTelemetry metrics collection

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        export_interval_ms: Metrics export interval in milliseconds
        exporter: "otlp" or "console"

    Returns:
        Meter: Meter for the service
    """
    if exporter == "otlp":
        metric_exporter = OTLPMetricExporter(endpoint=otlp_endpoint)
    elif exporter == "console":
        metric_exporter = ConsoleMetricExporter()
    else:
        raise ValueError(f"Unsupported metrics exporter: {exporter}")

    reader = PeriodicExportingMetricReader(
        metric_exporter,
        export_interval_millis=export_interval_ms
    )

    # Set global MeterProvider
    provider = MeterProvider(metric_readers=[reader])
    metrics.set_meter_provider(provider)

    meter = metrics.get_meter(service_name)

    logger.info(f"OpenTelemetry metrics configured, service name: {service_name}, exporter: {exporter}")

    return meter


def get_counter(name: str, description: str, unit: str = "1"):
    """Get or create counter

    Args:
        name: Counter name
        description: Counter description
        unit: Counter unit (default "1", representing count)

    Returns:
        Counter: Counter object
    """
    with _instruments_lock:
        if name not in _counters:
            meter = metrics.get_meter(__name__)
            _counters[name] = meter.create_counter(
                name=name,
                description=description,
                unit=unit
            )
        return _counters[name]


def get_histogram(name: str, description: str, unit: str = "ms"):
    """Get or create histogram

    Args:
        name: Histogram name
        description: Histogram description
        unit: Histogram unit (default "ms", representing milliseconds)

    Returns:
        Histogram: Histogram object
    """
    with _instruments_lock:
        if name not in _histograms:
            meter = metrics.get_meter(__name__)
            _histograms[name] = meter.create_histogram(
                name=name,
                description=description,
                unit=unit
            )
        return _histograms[name]


def increment_counter(name: str, amount: int = 1, attributes: Dict[str, Any] = None):
    """Increment counter value

    Args:
        name: Counter name
        amount: Amount to increment
        attributes: Attribute labels
    """
    counter = get_counter(name, f"Counter for {name}")
    counter.add(amount, attributes or {})


def record_latency(name: str, value_ms: float, attributes: Dict[str, Any] = None):
    """Record latency histogram

    Args:
        name: Histogram name
        value_ms: Latency value in milliseconds
        attributes: Attribute labels
    """
    histogram = get_histogram(name, f"Latency histogram for {name}")
    histogram.record(value_ms, attributes or {})


def add_gauge_callback(name: str, callback: GaugeCallback, description: str = None, unit: str = "1"):
    """Add gauge callback function

    Args:
        name: Gauge name
        callback: Callback receiving CallbackOptions and returning Observations
        description: Gauge description
        unit: Gauge unit

    Returns:
        ObservableGauge: Gauge object
    """
    meter = metrics.get_meter(__name__)
    if description is None:
        description = f"Gauge for {name}"

    return meter.create_observable_gauge(
        name=name,
        description=description,
        unit=unit,
        callbacks=[callback]
    )
