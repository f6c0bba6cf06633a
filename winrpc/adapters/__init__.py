"""
Transport Adapters Module

Adapter implementations providing one interface over different transports:
- http: XML-RPC over HTTP (default, one handler for all paths)
- zeromq: XML-RPC envelopes over ZeroMQ ROUTER/REQ sockets

Servers pass raw request bytes to a single request handler; clients encode
calls and decode responses with the XML-RPC codec.
"""

from .adapter_factory import AdapterFactory
from .adapter_interface import (
    ClientAdapterInterface,
    NoResponseError,
    ServerAdapterInterface,
    TransportBindError
)

__all__ = [
    "AdapterFactory",
    "ClientAdapterInterface",
    "NoResponseError",
    "ServerAdapterInterface",
    "TransportBindError"
]
