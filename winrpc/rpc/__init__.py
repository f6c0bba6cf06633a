"""
XML-RPC Core Module

- codec: methodCall / methodResponse encoding with boxed parameters
- registry: thread-safe identifier -> window handle mapping
- methods: window.make, window.delete, window.active and the method table
- dispatcher: decode -> lookup -> invoke -> encode for one request
"""

from .codec import Call, DecodeError, EncodeError, Variant, VariantType
from .dispatcher import Dispatcher, DispatchOutcome
from .methods import MethodHandler, build_method_table
from .registry import NO_ACTIVE_WINDOW, WindowNotFoundError, WindowRegistry

__all__ = [
    "Call",
    "DecodeError",
    "EncodeError",
    "Variant",
    "VariantType",
    "Dispatcher",
    "DispatchOutcome",
    "MethodHandler",
    "build_method_table",
    "NO_ACTIVE_WINDOW",
    "WindowNotFoundError",
    "WindowRegistry",
]
