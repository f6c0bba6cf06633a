"""
HTTP Adapter Package

XML-RPC over HTTP, the transport of the original window server:
every POST body is a methodCall envelope, every 200 body a methodResponse.
"""

from winrpc.adapters.http.client import HttpClient
from winrpc.adapters.http.server import HttpServer

__all__ = ["HttpClient", "HttpServer"]
