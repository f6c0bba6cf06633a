"""
Headless toolkit

Keeps windows as plain in-memory objects with at most one focused window.
Used when no GUI is available and throughout the test suite.
"""

import itertools
import logging
import threading
from typing import Optional, Set

from winrpc.toolkit.base import ToolkitError, ToolkitInterface, WindowHandle

logger = logging.getLogger(__name__)


class HeadlessWindow:
    """Native window object of the headless toolkit"""

    def __init__(self, serial: int):
        self.serial = serial
        self.destroyed = False

    def __repr__(self) -> str:
        return f"HeadlessWindow(serial={self.serial}, destroyed={self.destroyed})"


class HeadlessToolkit(ToolkitInterface):
    """In-memory toolkit, safe to call from any thread"""

    def __init__(self, activate_new: bool = True):
        """Initialize the toolkit

        Args:
            activate_new: Whether a new window takes focus, the way a freshly
                presented toplevel does
        """
        self.activate_new = activate_new
        self._lock = threading.Lock()
        self._serials = itertools.count(1)
        self._live: Set[int] = set()
        self._focused: Optional[HeadlessWindow] = None

    def create_window(self) -> WindowHandle:
        with self._lock:
            window = HeadlessWindow(next(self._serials))
            self._live.add(window.serial)
            if self.activate_new:
                self._focused = window
        logger.debug(f"Created headless window {window.serial}")
        return WindowHandle(window)

    def destroy_window(self, handle: WindowHandle) -> None:
        window = handle.native
        with self._lock:
            if window.destroyed:
                return
            window.destroyed = True
            self._live.discard(window.serial)
            if self._focused is window:
                self._focused = None
        logger.debug(f"Destroyed headless window {window.serial}")

    def is_active(self, handle: WindowHandle) -> bool:
        with self._lock:
            return self._focused is handle.native and not handle.native.destroyed

    def focus(self, handle: WindowHandle) -> None:
        """Give focus to a window, taking it from any other"""
        window = handle.native
        with self._lock:
            if window.destroyed:
                raise ToolkitError(f"Cannot focus destroyed window {window.serial}")
            self._focused = window

    def blur(self) -> None:
        """Leave no window focused"""
        with self._lock:
            self._focused = None

    @property
    def live_count(self) -> int:
        with self._lock:
            return len(self._live)
