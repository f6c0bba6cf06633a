"""
Window toolkit interface

Defines the operations the RPC core needs from a GUI toolkit. Any toolkit
binding implements ToolkitInterface so the dispatcher and registry never
touch native windows directly.
"""

import abc
from typing import Any, Optional


class ToolkitError(RuntimeError):
    """Raised when the toolkit cannot perform a window operation"""


class WindowHandle:
    """Opaque reference to a toolkit-owned window

    The identifier is assigned by the registry once and never changes.
    """

    __slots__ = ("native", "_identifier")

    def __init__(self, native: Any):
        self.native = native
        self._identifier: Optional[str] = None

    @property
    def identifier(self) -> Optional[str]:
        return self._identifier

    @identifier.setter
    def identifier(self, value: str):
        if self._identifier is not None:
            raise ValueError(f"Window already has identifier {self._identifier}")
        self._identifier = value

    def __repr__(self) -> str:
        return f"WindowHandle(identifier={self._identifier!r}, native={self.native!r})"


class ToolkitInterface(abc.ABC):
    """Toolkit interface, the window operations every toolkit must provide"""

    @abc.abstractmethod
    def create_window(self) -> WindowHandle:
        """Create a new window

        Returns:
            WindowHandle: Handle wrapping the native window

        Raises:
            ToolkitError: The window could not be created
        """
        pass

    @abc.abstractmethod
    def destroy_window(self, handle: WindowHandle) -> None:
        """Destroy the window behind a handle

        Args:
            handle: Handle returned by create_window
        """
        pass

    @abc.abstractmethod
    def is_active(self, handle: WindowHandle) -> bool:
        """Check whether the window currently has focus; queried live, never cached

        Args:
            handle: Handle returned by create_window
        """
        pass
