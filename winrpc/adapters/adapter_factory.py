"""
Adapter factory

Creates server and client adapters for the configured transport.
"""

from typing import Any, Dict, Union

from winrpc.adapters.adapter_interface import ClientAdapterInterface, ServerAdapterInterface
from winrpc.adapters.http.client import HttpClient
from winrpc.adapters.http.server import HttpServer
from winrpc.adapters.zeromq.client import ZeroMQClient
from winrpc.adapters.zeromq.server import ZeroMQServer
from winrpc.config import ServerConfig, TransportType


class AdapterFactory:
    """Adapter factory, creates transport adapter instances"""

    @staticmethod
    def create_server(config: ServerConfig) -> ServerAdapterInterface:
        """Create and bind a server adapter

        Args:
            config: Server configuration

        Returns:
            ServerAdapterInterface: Bound, not yet started server

        Raises:
            TransportBindError: The listening address cannot be bound
        """
        if config.transport is TransportType.HTTP:
            return HttpServer(
                host=config.host,
                port=config.port,
                max_request_bytes=config.max_request_bytes
            )
        elif config.transport is TransportType.ZEROMQ:
            return ZeroMQServer(
                bind_address=config.zeromq_address,
                max_workers=config.max_workers
            )
        else:
            raise ValueError(f"Invalid transport: {config.transport}")

    @staticmethod
    def create_client(transport: Union[str, TransportType], config: Dict[str, Any] = None) -> ClientAdapterInterface:
        """Create a client adapter

        Args:
            transport: Transport type, "http" or "zeromq"
            config: Adapter parameters (server_address, timeout_ms)

        Returns:
            ClientAdapterInterface: Client adapter instance

        Raises:
            ValueError: Invalid transport type
        """
        if config is None:
            config = {}

        if isinstance(transport, str):
            transport = TransportType.parse(transport)

        if transport is TransportType.HTTP:
            return HttpClient(
                url=config.get("server_address", "http://localhost:8082"),
                timeout_ms=config.get("timeout_ms", 5000)
            )
        elif transport is TransportType.ZEROMQ:
            return ZeroMQClient(
                server_address=config.get("server_address", "tcp://localhost:8082"),
                timeout_ms=config.get("timeout_ms", 5000)
            )
        else:
            raise ValueError(f"Invalid transport: {transport}")
