"""
winrpc - Window Control RPC Server

Exposes a small XML-RPC surface that lets an external client create, destroy
and query windows owned by a long-running process:

1. Wire Format: XML-RPC methodCall / methodResponse envelopes
2. Methods: window.make, window.delete, window.active
3. Transports:
   - http: threaded HTTP server, one handler for all paths
   - zeromq: ROUTER socket served by a worker pool

All transports hand raw request bytes to a single Dispatcher and send back
whatever bytes it returns.
"""

__version__ = "0.1.0"
