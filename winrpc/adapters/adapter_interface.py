"""
Transport adapter interfaces

Defines the unified interface implemented by every transport adapter (HTTP,
ZeroMQ). Servers move raw request bytes to a single request handler and send
back whatever bytes it returns; clients speak XML-RPC on top of the same
transports.
"""

import abc
from typing import Any, Callable, Iterable, Optional

# Receives one request body, returns the response body or None to drop it
RequestHandler = Callable[[bytes], Optional[bytes]]


class TransportBindError(RuntimeError):
    """Raised when a server cannot bind its listening address"""


class NoResponseError(ConnectionError):
    """Raised by clients when the server dropped the request"""


class ClientAdapterInterface(abc.ABC):
    """Client adapter interface, the methods every client adapter must implement"""

    @abc.abstractmethod
    def call(self, method: str, params: Iterable[Any] = ()) -> Any:
        """Send an XML-RPC request and wait for the response

        Args:
            method: Method name to call
            params: Positional method parameters

        Returns:
            The single value of the response

        Raises:
            TimeoutError: Request timed out
            ConnectionError: Connection failed
            NoResponseError: The server sent no response
            DecodeError: Response is not a valid envelope
        """
        pass

    @abc.abstractmethod
    def close(self) -> None:
        """Close the connection and release resources"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class ServerAdapterInterface(abc.ABC):
    """Server adapter interface, the methods every server adapter must implement"""

    def __init__(self):
        self.request_handler: Optional[RequestHandler] = None

    def set_request_handler(self, handler: RequestHandler) -> None:
        """Register the handler for every incoming request

        Args:
            handler: Callable taking the request body and returning the
                response body, or None for no response

        Raises:
            RuntimeError: A handler is already registered
        """
        if self.request_handler is not None:
            raise RuntimeError("Request handler already registered")
        self.request_handler = handler

    @property
    @abc.abstractmethod
    def address(self) -> str:
        """Address the server is bound to, with the real port"""
        pass

    @abc.abstractmethod
    def start(self, threaded: bool = True):
        """Start serving

        Args:
            threaded: Whether to run in a background thread

        Raises:
            RuntimeError: No request handler is registered
        """
        pass

    @abc.abstractmethod
    def stop(self):
        """Stop serving and release the listening resources"""
        pass
