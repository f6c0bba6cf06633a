"""
HTTP client adapter

XML-RPC client on top of httpx. A 204 answer means the server dropped the
request and is reported as NoResponseError.
"""

import logging
import time
from typing import Any, Iterable

import httpx

from winrpc.adapters.adapter_interface import ClientAdapterInterface, NoResponseError
from winrpc.rpc import codec
from winrpc.telemetry.metrics import increment_counter, record_latency
from winrpc.telemetry.tracer import inject_trace_context

logger = logging.getLogger(__name__)


class HttpClient(ClientAdapterInterface):
    """HTTP client adapter"""

    def __init__(self, url: str = "http://localhost:8082", timeout_ms: int = 5000):
        """Initialize the HTTP client

        Args:
            url: Server URL; any path reaches the RPC handler
            timeout_ms: Request timeout in milliseconds
        """
        self.url = url
        self.timeout_ms = timeout_ms
        self.client = httpx.Client(timeout=timeout_ms / 1000)
        logger.info(f"HTTP client targeting {url}")

    def close(self):
        self.client.close()

    def call(self, method: str, params: Iterable[Any] = ()) -> Any:
        payload = codec.encode_call(method, params)

        headers = {"Content-Type": "text/xml"}
        headers.update(inject_trace_context())

        start_time = time.time()
        increment_counter("rpc.client.requests", 1, {"method": method})

        try:
            response = self.client.post(self.url, content=payload, headers=headers)
        except httpx.TimeoutException as e:
            increment_counter("rpc.client.errors", 1, {"type": "timeout", "method": method})
            raise TimeoutError(f"HTTP request timed out ({self.timeout_ms}ms)") from e
        except httpx.HTTPError as e:
            increment_counter("rpc.client.errors", 1, {"type": "http_error", "method": method})
            raise ConnectionError(f"HTTP connection error: {str(e)}") from e

        latency_ms = (time.time() - start_time) * 1000
        record_latency("rpc.client.latency", latency_ms, {"method": method})
        logger.debug(f"Received HTTP {response.status_code} for {method}, latency: {latency_ms:.2f}ms")

        if response.status_code == httpx.codes.NO_CONTENT:
            increment_counter("rpc.client.errors", 1, {"type": "no_response", "method": method})
            raise NoResponseError(f"Server sent no response for {method}")

        if response.status_code != httpx.codes.OK:
            increment_counter("rpc.client.errors", 1, {"type": "http_status", "method": method})
            raise ConnectionError(f"Unexpected HTTP status {response.status_code} for {method}")

        return codec.decode_response(response.content)
