"""
Window client

Typed wrapper over a client adapter for the three window methods.
"""

from winrpc.adapters.adapter_interface import ClientAdapterInterface
from winrpc.rpc.methods import WINDOW_ACTIVE, WINDOW_DELETE, WINDOW_MAKE
from winrpc.rpc.registry import NO_ACTIVE_WINDOW


class WindowClient:
    """Calls window.make, window.delete and window.active on a server"""

    def __init__(self, adapter: ClientAdapterInterface):
        self.adapter = adapter

    def make(self) -> str:
        """Create a window, return its identifier"""
        return self.adapter.call(WINDOW_MAKE)

    def delete(self, identifier: str) -> bool:
        """Destroy a window; False if the identifier is not live"""
        return self.adapter.call(WINDOW_DELETE, [identifier])

    def active(self) -> str:
        """Identifier of the active window, or "-1" """
        return self.adapter.call(WINDOW_ACTIVE)

    def has_active(self) -> bool:
        return self.active() != NO_ACTIVE_WINDOW

    def close(self):
        self.adapter.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
