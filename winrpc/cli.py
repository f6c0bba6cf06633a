"""
Command line entry point for the window RPC server

Flags override the WINRPC_* environment configuration. Failing to bind the
listening address is the only fatal error and exits with status 1.
"""

import argparse
import logging
import signal
import sys
import threading
from dataclasses import replace
from typing import List, Optional

from winrpc.adapters.adapter_interface import TransportBindError
from winrpc.config import ServerConfig, TransportType
from winrpc.service import WindowService
from winrpc.telemetry.metrics import setup_metrics
from winrpc.telemetry.tracer import setup_tracer

logger = logging.getLogger("winrpc")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Window control XML-RPC server")
    parser.add_argument("--transport", choices=[t.value for t in TransportType],
                        help="Transport to serve on (default: http)")
    parser.add_argument("--host", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to bind (default: 8082, 0 for any)")
    parser.add_argument("--workers", type=int, help="ZeroMQ worker threads")
    parser.add_argument("--id-prefix", help="Prefix of window identifiers")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    parser.add_argument("--tracing", action="store_true", default=None, help="Export traces")
    parser.add_argument("--metrics", action="store_true", default=None, help="Export metrics")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Environment configuration with command line overrides applied"""
    config = ServerConfig.from_env()

    overrides = {
        "transport": args.transport,
        "host": args.host,
        "port": args.port,
        "max_workers": args.workers,
        "identifier_prefix": args.id_prefix,
        "log_level": args.log_level,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    telemetry = config.telemetry
    if args.tracing:
        telemetry = replace(telemetry, enable_tracing=True)
    if args.metrics:
        telemetry = replace(telemetry, enable_metrics=True)

    # replace() re-runs validation on the overridden values
    return replace(config, telemetry=telemetry, **overrides)


def configure_logging(level: str):
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def setup_telemetry(config: ServerConfig):
    telemetry = config.telemetry
    if telemetry.enable_tracing:
        setup_tracer(telemetry.service_name, telemetry.otlp_endpoint, exporter=telemetry.exporter)
    if telemetry.enable_metrics:
        setup_metrics(
            telemetry.service_name,
            telemetry.otlp_endpoint,
            export_interval_ms=telemetry.export_interval_ms,
            exporter=telemetry.exporter
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Start the window RPC server and block until SIGINT/SIGTERM"""
    try:
        config = build_config(parse_args(argv))
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level)
    setup_telemetry(config)

    try:
        service = WindowService(config)
    except TransportBindError as e:
        logger.error(f"Unable to create server: {e}")
        return 1

    stop_requested = threading.Event()

    def handle_signal(sig, frame):
        logger.info("Received exit signal, stopping server...")
        stop_requested.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    service.start(threaded=True)
    try:
        while not stop_requested.wait(timeout=0.5):
            pass
    finally:
        service.stop()

    logger.info("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
