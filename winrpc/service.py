"""
Window RPC service

Wires toolkit, registry, method table, dispatcher and transport together
once, and owns their lifecycle: the registry is drained when the service
stops.
"""

import logging
from typing import Optional

from opentelemetry.metrics import Observation

from winrpc.adapters.adapter_factory import AdapterFactory
from winrpc.config import ServerConfig
from winrpc.rpc.dispatcher import Dispatcher
from winrpc.rpc.methods import build_method_table
from winrpc.rpc.registry import WindowRegistry
from winrpc.telemetry.metrics import add_gauge_callback
from winrpc.toolkit.base import ToolkitInterface
from winrpc.toolkit.headless import HeadlessToolkit

logger = logging.getLogger(__name__)


class WindowService:
    """The window RPC server and everything it owns"""

    def __init__(self, config: Optional[ServerConfig] = None, toolkit: Optional[ToolkitInterface] = None):
        """Build the service and bind its transport

        Args:
            config: Server configuration, defaults to ServerConfig.default()
            toolkit: Window toolkit, defaults to HeadlessToolkit

        Raises:
            TransportBindError: The listening address cannot be bound
        """
        self.config = config or ServerConfig.default()
        self.toolkit = toolkit or HeadlessToolkit()
        self.registry = WindowRegistry(self.toolkit, identifier_prefix=self.config.identifier_prefix)
        self.method_table = build_method_table(self.registry, self.toolkit)
        self.dispatcher = Dispatcher(self.method_table)

        self.server = AdapterFactory.create_server(self.config)
        self.server.set_request_handler(self.dispatcher)

        if self.config.telemetry.enable_metrics:
            add_gauge_callback(
                "winrpc.windows.live",
                lambda options: [Observation(len(self.registry))],
                description="Number of registered windows"
            )

        logger.info(f"Window service configured: {self.config.to_dict()}")

    @property
    def address(self) -> str:
        return self.server.address

    def start(self, threaded: bool = True):
        """Start serving requests

        Args:
            threaded: Whether to run the transport in a background thread
        """
        logger.info(f"Starting window RPC server on {self.address}")
        self.server.start(threaded=threaded)

    def stop(self):
        """Stop the transport, then destroy every remaining window"""
        self.server.stop()
        released = self.registry.drain()
        logger.info(f"Window RPC server stopped, {released} window(s) released")

    def __enter__(self):
        self.start(threaded=True)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
