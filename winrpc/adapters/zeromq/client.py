"""
ZeroMQ client adapter

XML-RPC client over a REQ socket. The server leaves dropped requests
unanswered, which surfaces here as a timeout; the socket is then rebuilt so
the client stays usable.
"""

import logging
import time
from typing import Any, Iterable

import zmq

from winrpc.adapters.adapter_interface import ClientAdapterInterface
from winrpc.rpc import codec
from winrpc.telemetry.metrics import increment_counter, record_latency

logger = logging.getLogger(__name__)


class ZeroMQClient(ClientAdapterInterface):
    """ZeroMQ client adapter"""

    def __init__(self,
                 server_address: str = "tcp://localhost:8082",
                 timeout_ms: int = 5000):
        """Initialize the ZeroMQ client

        Args:
            server_address: ZeroMQ server address
            timeout_ms: Request timeout in milliseconds
        """
        self.server_address = server_address
        self.timeout_ms = timeout_ms
        self.context = zmq.Context()
        self.socket = None
        self._connect()
        logger.info(f"ZeroMQ client connected to {server_address}")

    def _connect(self):
        self.socket = self.context.socket(zmq.REQ)
        self.socket.setsockopt(zmq.RCVTIMEO, self.timeout_ms)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.connect(self.server_address)

    def _reset(self):
        # A REQ socket cannot send again until it receives, so start over
        self.socket.close()
        self._connect()

    def close(self):
        if self.socket is not None and not self.socket.closed:
            self.socket.close()
        if not self.context.closed:
            self.context.term()

    def call(self, method: str, params: Iterable[Any] = ()) -> Any:
        payload = codec.encode_call(method, params)
        start_time = time.time()

        try:
            logger.debug(f"Sending request: {payload[:200]!r}")
            self.socket.send(payload)
            increment_counter("rpc.client.requests", 1, {"method": method})

            response_bytes = self.socket.recv()

        except zmq.error.Again:
            latency_ms = (time.time() - start_time) * 1000
            logger.warning(f"Request {method} timed out after {latency_ms:.2f}ms")
            increment_counter("rpc.client.errors", 1, {"type": "timeout", "method": method})
            self._reset()
            raise TimeoutError(f"ZeroMQ request timed out ({self.timeout_ms}ms)")

        except zmq.error.ZMQError as e:
            logger.error(f"ZeroMQ error: {str(e)}")
            increment_counter("rpc.client.errors", 1, {"type": "zmq_error", "method": method})
            self._reset()
            raise ConnectionError(f"ZeroMQ connection error: {str(e)}") from e

        latency_ms = (time.time() - start_time) * 1000
        record_latency("rpc.client.latency", latency_ms, {"method": method})
        logger.debug(f"Received response, latency: {latency_ms:.2f}ms")

        return codec.decode_response(response_bytes)
