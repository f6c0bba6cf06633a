"""
ZeroMQ server adapter

Serves XML-RPC envelopes over a ROUTER socket. Requests are handed to a
thread pool so several clients are served concurrently; replies are queued
back to the socket thread, which is the only thread touching the socket.
A dropped request simply gets no reply.
"""

import logging
import queue
import threading
import time
from concurrent import futures
from typing import List, Optional

import zmq

from winrpc.adapters.adapter_interface import ServerAdapterInterface, TransportBindError
from winrpc.telemetry.metrics import increment_counter, record_latency

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 1
# Time allowed on shutdown to deliver replies still queued on the socket
SHUTDOWN_LINGER_MS = 200


class ZeroMQServer(ServerAdapterInterface):
    """ZeroMQ server adapter, ROUTER socket with a worker pool"""

    def __init__(self,
                 bind_address: str = "tcp://*:8082",
                 max_workers: int = 10):
        """Initialize and bind the ZeroMQ server

        Args:
            bind_address: Endpoint to bind; port 0 binds a random port
            max_workers: Number of request worker threads

        Raises:
            TransportBindError: The endpoint cannot be bound
        """
        super().__init__()
        self.max_workers = max_workers
        self.running = False
        self.started = False
        self.server_thread: Optional[threading.Thread] = None
        self._replies: "queue.Queue[List[bytes]]" = queue.Queue()

        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)

        try:
            base, _, port = bind_address.rpartition(":")
            if port == "0":
                self.socket.bind_to_random_port(base)
            else:
                self.socket.bind(bind_address)
        except zmq.ZMQError as e:
            self.socket.close()
            self.context.term()
            raise TransportBindError(f"Unable to bind ZeroMQ server to {bind_address}: {e}") from e

        self._address = self.socket.getsockopt_string(zmq.LAST_ENDPOINT)
        logger.info(f"ZeroMQ server bound to {self._address}")

    @property
    def address(self) -> str:
        return self._address

    @property
    def port(self) -> int:
        return int(self._address.rsplit(":", 1)[1])

    def start(self, threaded: bool = True):
        if self.request_handler is None:
            raise RuntimeError("No request handler registered")

        self.running = True
        self.started = True

        if threaded:
            self.server_thread = threading.Thread(target=self._run_server, daemon=True)
            self.server_thread.start()
            logger.info("ZeroMQ server started in background thread")
        else:
            logger.info("ZeroMQ server started in main thread")
            self._run_server()

    def stop(self):
        """Stop serving; the socket thread finishes requests in flight and
        closes the socket on its way out"""
        self.running = False
        if self.server_thread is not None:
            self.server_thread.join()
            self.server_thread = None
            logger.info("ZeroMQ server stopped")

        if not self.started and not self.socket.closed:
            self.socket.close()
            self.context.term()

    def _run_server(self):
        """Server main loop"""
        logger.info("ZeroMQ server accepting requests")

        executor = futures.ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="winrpc-zmq-worker"
        )
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)

        try:
            while self.running:
                try:
                    events = dict(poller.poll(POLL_INTERVAL_MS))
                    if self.socket in events:
                        frames = self.socket.recv_multipart(flags=zmq.NOBLOCK)
                        self._submit(executor, frames)
                    self._flush_replies()

                except zmq.error.Again:
                    continue

                except Exception as e:
                    logger.error(f"Error in server loop: {str(e)}")
                    increment_counter("rpc.server.errors", 1, {"type": "loop_error"})
                    time.sleep(0.1)
        finally:
            executor.shutdown(wait=True)
            self._flush_replies()
            self.socket.close(linger=SHUTDOWN_LINGER_MS)
            self.context.term()

    def _submit(self, executor: futures.ThreadPoolExecutor, frames: List[bytes]):
        # REQ clients arrive as [identity, b"", payload]
        if len(frames) < 3 or frames[-2] != b"":
            logger.warning(f"Dropping message with unexpected envelope ({len(frames)} frames)")
            increment_counter("rpc.server.errors", 1, {"type": "bad_envelope"})
            return

        envelope, payload = frames[:-1], frames[-1]
        executor.submit(self._process, envelope, payload, time.time())

    def _process(self, envelope: List[bytes], payload: bytes, received_at: float):
        try:
            response = self.request_handler(payload)
        except Exception:
            logger.exception("Request handler failed")
            increment_counter("rpc.server.errors", 1, {"type": "internal_error"})
            return

        if response is None:
            logger.debug("No response for request, leaving it unanswered")
            return

        self._replies.put(envelope + [response])
        record_latency("rpc.zeromq.request.latency", (time.time() - received_at) * 1000)

    def _flush_replies(self):
        while True:
            try:
                frames = self._replies.get_nowait()
            except queue.Empty:
                return
            self.socket.send_multipart(frames)
