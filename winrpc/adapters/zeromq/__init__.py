"""
ZeroMQ Adapter Package

Implements ZeroMQ-based server and client adapters carrying XML-RPC
envelopes: REQ clients talk to a ROUTER server backed by a worker pool.
"""

from winrpc.adapters.zeromq.client import ZeroMQClient
from winrpc.adapters.zeromq.server import ZeroMQServer

__all__ = ["ZeroMQClient", "ZeroMQServer"]
