#!/usr/bin/env python
"""
Window Client Example

Demonstrates the window methods against a running winrpc server:

    winrpc-server --port 8082
    python examples/window_client_example.py --transport http
"""

import argparse
import logging

from winrpc.adapters.adapter_factory import AdapterFactory
from winrpc.adapters.adapter_interface import NoResponseError
from winrpc.client import WindowClient
from winrpc.telemetry.tracer import create_span, setup_tracer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Run window client example"""
    parser = argparse.ArgumentParser(description="winrpc client example")
    parser.add_argument("--transport", default="http", choices=["http", "zeromq"])
    parser.add_argument("--address", help="Server address (default depends on transport)")
    parser.add_argument("--tracing", action="store_true", help="Print client spans to the console")
    args = parser.parse_args()

    if args.tracing:
        setup_tracer("winrpc-client-example", exporter="console")

    address = args.address or {
        "http": "http://localhost:8082",
        "zeromq": "tcp://localhost:8082",
    }[args.transport]

    adapter = AdapterFactory.create_client(args.transport, {"server_address": address})

    with WindowClient(adapter) as client, create_span("window-client-example"):
        identifier = client.make()
        logger.info(f"Created window {identifier}")
        logger.info(f"Active window: {client.active()}")

        logger.info(f"Deleted {identifier}: {client.delete(identifier)}")
        logger.info(f"Deleted {identifier} again: {client.delete(identifier)}")
        logger.info(f"Active window after delete: {client.active()}")

        try:
            adapter.call("nonexistent.method")
        except (NoResponseError, TimeoutError) as e:
            logger.info(f"Unknown method got no response: {e}")

    logger.info("Client exited")


if __name__ == "__main__":
    main()
