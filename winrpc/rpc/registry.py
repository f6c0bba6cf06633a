"""
Window registry

Thread-safe mapping from string identifiers to live window handles. It is the
single synchronization point for window state: identifier allocation,
removal and the active-window scan all take the same lock.
"""

import itertools
import logging
import threading
from typing import Dict, List

from winrpc.toolkit.base import ToolkitInterface, WindowHandle

logger = logging.getLogger(__name__)

# Identifier returned when no registered window is active
NO_ACTIVE_WINDOW = "-1"


class WindowNotFoundError(KeyError):
    """No live registration exists for an identifier"""

    def __init__(self, identifier: str):
        super().__init__(identifier)
        self.identifier = identifier

    def __str__(self) -> str:
        return f"Window not found: {self.identifier}"


class WindowRegistry:
    """Registry of live windows keyed by identifier"""

    def __init__(self, toolkit: ToolkitInterface, identifier_prefix: str = "w"):
        """Initialize the registry

        Args:
            toolkit: Toolkit that answers is-active queries and destroys windows
            identifier_prefix: Prefix of every allocated identifier
        """
        self.toolkit = toolkit
        self.identifier_prefix = identifier_prefix
        self._lock = threading.Lock()
        self._windows: Dict[str, WindowHandle] = {}
        self._counter = itertools.count(1)

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def __contains__(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._windows

    def identifiers(self) -> List[str]:
        """Snapshot of the live identifiers"""
        with self._lock:
            return list(self._windows)

    def create(self, handle: WindowHandle) -> str:
        """Register a handle under a fresh identifier

        Identifiers are never reused, even after the window is removed.

        Args:
            handle: Handle returned by the toolkit

        Returns:
            str: The new identifier

        Raises:
            ValueError: The handle is, or once was, registered
        """
        with self._lock:
            if handle.identifier is not None:
                raise ValueError(f"Handle already registered as {handle.identifier}")
            identifier = f"{self.identifier_prefix}{next(self._counter)}"
            handle.identifier = identifier
            self._windows[identifier] = handle

        logger.debug(f"Registered window {identifier}")
        return identifier

    def lookup(self, identifier: str) -> WindowHandle:
        """Return the handle registered under an identifier

        Raises:
            WindowNotFoundError: No live registration for the identifier
        """
        with self._lock:
            handle = self._windows.get(identifier)
        if handle is None:
            raise WindowNotFoundError(identifier)
        return handle

    def remove(self, identifier: str) -> WindowHandle:
        """Atomically disassociate an identifier and return its handle

        Raises:
            WindowNotFoundError: Unknown or already removed identifier
        """
        with self._lock:
            handle = self._windows.pop(identifier, None)
            if handle is None:
                raise WindowNotFoundError(identifier)

        logger.debug(f"Removed window {identifier}")
        return handle

    def release(self, identifier: str) -> WindowHandle:
        """Remove an identifier and destroy its window

        Only the caller that wins the removal destroys the window, so
        concurrent releases of one identifier destroy it once.

        Raises:
            WindowNotFoundError: Unknown or already removed identifier; the
                toolkit is not called
        """
        handle = self.remove(identifier)
        self.toolkit.destroy_window(handle)
        return handle

    def find_active(self) -> str:
        """Return the identifier of the first active window

        Returns:
            str: Identifier, or NO_ACTIVE_WINDOW if none is active or the
                registry is empty
        """
        with self._lock:
            for identifier, handle in self._windows.items():
                if self.toolkit.is_active(handle):
                    logger.debug(f"Active window identifier: {identifier}")
                    return identifier

        logger.debug("No active window")
        return NO_ACTIVE_WINDOW

    def drain(self) -> int:
        """Release every remaining window, used at shutdown

        Returns:
            int: Number of windows removed
        """
        with self._lock:
            handles = list(self._windows.values())
            self._windows.clear()

        for handle in handles:
            try:
                self.toolkit.destroy_window(handle)
            except Exception as e:
                logger.error(f"Failed to destroy window {handle.identifier}: {str(e)}")

        if handles:
            logger.info(f"Released {len(handles)} remaining window(s)")
        return len(handles)
