"""
HTTP server adapter

Serves XML-RPC over HTTP with a thread per connection. One handler answers
every path: the POST body is the request envelope, the response body is
whatever the request handler returns.
"""

import logging
import threading
import time
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional

from winrpc.adapters.adapter_interface import ServerAdapterInterface, TransportBindError
from winrpc.config import DEFAULT_MAX_REQUEST_BYTES
from winrpc.telemetry.metrics import increment_counter, record_latency
from winrpc.telemetry.tracer import extract_trace_context, with_trace_context

logger = logging.getLogger(__name__)

DISCARD_CHUNK_BYTES = 64 * 1024

# Idle keep-alive connections are closed after this many seconds
CONNECTION_TIMEOUT_S = 5


class _RpcRequestHandler(BaseHTTPRequestHandler):
    server_version = "winrpc"
    protocol_version = "HTTP/1.1"
    timeout = CONNECTION_TIMEOUT_S

    # Set on the per-server subclass
    adapter: "HttpServer" = None

    def do_POST(self) -> None:
        start_time = time.time()
        increment_counter("rpc.http.requests", 1)

        # Log request
        if logger.isEnabledFor(logging.DEBUG):
            headers = "\n".join(f"{name}: {value}" for name, value in self.headers.items())
            logger.debug(f"HTTP request:\n{self.command} {self.path} {self.request_version}\n{headers}")

        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            self.close_connection = True
            self._send(HTTPStatus.BAD_REQUEST)
            return

        if length <= 0:
            logger.warning("Empty HTTP request")
            self._send(HTTPStatus.BAD_REQUEST)
            return

        if length > self.adapter.max_request_bytes:
            logger.warning(f"HTTP request too large: {length} bytes")
            self._discard(length)
            self._send(HTTPStatus.REQUEST_ENTITY_TOO_LARGE)
            return

        body = self.rfile.read(length)

        with with_trace_context(extract_trace_context(self.headers)):
            response = self.adapter.request_handler(body)

        if response is None:
            self._send(HTTPStatus.NO_CONTENT)
        else:
            self._send(HTTPStatus.OK, response)

        latency_ms = (time.time() - start_time) * 1000
        record_latency("rpc.http.request.latency", latency_ms)

    def _discard(self, length: int) -> None:
        while length > 0:
            chunk = self.rfile.read(min(length, DISCARD_CHUNK_BYTES))
            if not chunk:
                break
            length -= len(chunk)

    def _send(self, status: HTTPStatus, body: Optional[bytes] = None) -> None:
        self.send_response(status)
        if body is not None:
            self.send_header("Content-Type", "text/xml")
        self.send_header("Content-Length", str(len(body) if body else 0))
        self.end_headers()
        if body:
            self.wfile.write(body)
        logger.debug(f"Response: {status.value} {status.phrase}")

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")


class _ThreadingServer(ThreadingHTTPServer):
    # server_close() joins request threads still running
    daemon_threads = False
    block_on_close = True
    allow_reuse_port = False


class HttpServer(ServerAdapterInterface):
    """HTTP server adapter"""

    def __init__(self,
                 host: str = "0.0.0.0",
                 port: int = 8082,
                 max_request_bytes: int = DEFAULT_MAX_REQUEST_BYTES):
        """Initialize and bind the HTTP server

        Args:
            host: Interface to bind
            port: Port to bind, 0 for an ephemeral port
            max_request_bytes: Largest accepted request body

        Raises:
            TransportBindError: The address cannot be bound
        """
        super().__init__()
        self.max_request_bytes = max_request_bytes
        self.server_thread: Optional[threading.Thread] = None
        self.running = False

        handler_class = type("RpcRequestHandler", (_RpcRequestHandler,), {"adapter": self})
        try:
            self.httpd = _ThreadingServer((host, port), handler_class)
        except OSError as e:
            raise TransportBindError(f"Unable to bind HTTP server to {host}:{port}: {e}") from e

        logger.info(f"HTTP server bound to {self.address}")

    @property
    def address(self) -> str:
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def port(self) -> int:
        return self.httpd.server_address[1]

    def start(self, threaded: bool = True):
        if self.request_handler is None:
            raise RuntimeError("No request handler registered")

        self.running = True

        if threaded:
            self.server_thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)
            self.server_thread.start()
            logger.info("HTTP server started in background thread")
        else:
            logger.info("HTTP server started in main thread")
            try:
                self.httpd.serve_forever()
            finally:
                self.httpd.server_close()

    def stop(self):
        """Stop serving and wait for requests in flight

        When running in the main thread, call from another thread.
        """
        if self.running:
            self.running = False
            self.httpd.shutdown()
            if self.server_thread is not None:
                self.server_thread.join(timeout=1.0)
                self.server_thread = None
            logger.info("HTTP server stopped")
        self.httpd.server_close()
