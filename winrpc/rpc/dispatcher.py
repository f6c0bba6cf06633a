"""
RPC dispatcher

Turns one request payload into one response payload:
Received -> Decoded -> Dispatched -> Responded, or Rejected. A rejected
request produces no response bytes; nothing raised while handling a request
reaches the transport.
"""

import logging
import time
from enum import Enum
from typing import Mapping, Optional

from opentelemetry import trace

from winrpc.rpc import codec
from winrpc.rpc.codec import DecodeError, EncodeError
from winrpc.rpc.methods import MethodHandler
from winrpc.telemetry.metrics import increment_counter, record_latency
from winrpc.telemetry.tracer import create_span

logger = logging.getLogger(__name__)


class DispatchOutcome(Enum):
    RESPONDED = "responded"
    EMPTY_REQUEST = "empty_request"
    DECODE_ERROR = "decode_error"
    UNKNOWN_METHOD = "unknown_method"
    HANDLER_ERROR = "handler_error"
    ENCODE_ERROR = "encode_error"


class Dispatcher:
    """Decodes a request, runs the handler and encodes its result"""

    def __init__(self, method_table: Mapping[str, MethodHandler]):
        """Initialize the dispatcher

        Args:
            method_table: Method name to handler, built once at startup
        """
        self.method_table = method_table

    def __call__(self, payload: bytes) -> Optional[bytes]:
        return self.dispatch(payload)

    def dispatch(self, payload: bytes) -> Optional[bytes]:
        """Handle one request

        Args:
            payload: Raw request body

        Returns:
            bytes: Encoded response, or None when the request is dropped
        """
        start_time = time.time()
        increment_counter("rpc.server.requests.received", 1)

        response, outcome, method = self._dispatch(payload)

        latency_ms = (time.time() - start_time) * 1000
        attributes = {"outcome": outcome.value}
        if outcome is not DispatchOutcome.UNKNOWN_METHOD and method:
            attributes["method"] = method
        increment_counter("rpc.server.dispatch.outcomes", 1, attributes)
        record_latency("rpc.server.request.latency", latency_ms, attributes)

        if response is not None:
            logger.debug(f"Response for {method}: {len(response)} bytes in {latency_ms:.2f}ms")
        return response

    def _dispatch(self, payload: bytes):
        if not payload:
            logger.warning("Empty RPC request")
            return None, DispatchOutcome.EMPTY_REQUEST, None

        logger.debug(f"RPC request: {payload[:200]!r}")

        try:
            call = codec.decode(payload)
        except DecodeError as e:
            logger.warning(f"Malformed XMLRPC request: {str(e)}")
            return None, DispatchOutcome.DECODE_ERROR, None

        handler = self.method_table.get(call.method)
        if handler is None:
            logger.warning(f"Unknown method: {call.method}")
            return None, DispatchOutcome.UNKNOWN_METHOD, call.method

        logger.debug(f"Method name: {call.method}")

        with create_span(
            f"rpc.{call.method}",
            {"rpc.system": "xmlrpc", "rpc.method": call.method},
            kind=trace.SpanKind.SERVER,
        ) as span:
            try:
                result = handler.handle(call.params)
            except Exception as e:
                logger.exception(f"Error executing method {call.method}")
                span.record_exception(e)
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return None, DispatchOutcome.HANDLER_ERROR, call.method

            try:
                response = codec.encode(result)
            except EncodeError as e:
                logger.error(f"Failed to set XMLRPC response for {call.method}: {str(e)}")
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                return None, DispatchOutcome.ENCODE_ERROR, call.method

        return response, DispatchOutcome.RESPONDED, call.method
