"""
Built-in RPC methods

Each method is a MethodHandler value; build_method_table wires the three
window methods to one registry and toolkit and freezes the mapping.
"""

import abc
import logging
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from winrpc.rpc.codec import DecodeError, Variant, string_param
from winrpc.rpc.registry import WindowNotFoundError, WindowRegistry
from winrpc.toolkit.base import ToolkitInterface

logger = logging.getLogger(__name__)

Result = Union[str, bool]

WINDOW_MAKE = "window.make"
WINDOW_DELETE = "window.delete"
WINDOW_ACTIVE = "window.active"


class MethodHandler(abc.ABC):
    """A single RPC method"""

    name: str = ""

    @abc.abstractmethod
    def handle(self, params: Tuple[Variant, ...]) -> Result:
        """Run the method

        Args:
            params: Boxed call parameters

        Returns:
            The single value sent back to the caller
        """
        pass


class WindowMake(MethodHandler):
    """Create a window and return its identifier"""

    name = WINDOW_MAKE

    def __init__(self, registry: WindowRegistry, toolkit: ToolkitInterface):
        self.registry = registry
        self.toolkit = toolkit

    def handle(self, params: Tuple[Variant, ...]) -> Result:
        handle = self.toolkit.create_window()
        return self.registry.create(handle)


class WindowDelete(MethodHandler):
    """Destroy the window named by the single string parameter

    Returns False instead of failing when the parameter is malformed or the
    identifier is not live.
    """

    name = WINDOW_DELETE

    def __init__(self, registry: WindowRegistry):
        self.registry = registry

    def handle(self, params: Tuple[Variant, ...]) -> Result:
        if len(params) != 1:
            logger.warning(f"Malformed method parameters: expected 1, got {len(params)}")
            return False

        try:
            identifier = string_param(params, 0)
        except DecodeError as e:
            logger.warning(f"Malformed parameter value: {str(e)}")
            return False

        logger.debug(f"Method parameter: {identifier}")

        try:
            self.registry.release(identifier)
        except WindowNotFoundError:
            logger.warning(f"Cannot delete unknown window: {identifier}")
            return False

        return True


class WindowActive(MethodHandler):
    """Return the identifier of the active window, or "-1" """

    name = WINDOW_ACTIVE

    def __init__(self, registry: WindowRegistry):
        self.registry = registry

    def handle(self, params: Tuple[Variant, ...]) -> Result:
        return self.registry.find_active()


def build_method_table(registry: WindowRegistry, toolkit: ToolkitInterface) -> Mapping[str, MethodHandler]:
    """Build the read-only method table

    Args:
        registry: Registry shared by every handler
        toolkit: Toolkit used to create windows

    Returns:
        Mapping[str, MethodHandler]: Method name to handler, immutable
    """
    handlers = [
        WindowMake(registry, toolkit),
        WindowDelete(registry),
        WindowActive(registry),
    ]
    table = {handler.name: handler for handler in handlers}
    logger.debug(f"Registered RPC methods: {', '.join(table)}")
    return MappingProxyType(table)
