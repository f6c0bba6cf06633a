"""
Window Toolkit Module

The toolkit owns the real windows; the RPC core only holds opaque handles:
- base: WindowHandle and the ToolkitInterface every toolkit implements
- headless: in-memory toolkit used by default and in tests
"""

from .base import ToolkitError, ToolkitInterface, WindowHandle
from .headless import HeadlessToolkit, HeadlessWindow

__all__ = [
    "ToolkitError",
    "ToolkitInterface",
    "WindowHandle",
    "HeadlessToolkit",
    "HeadlessWindow",
]
