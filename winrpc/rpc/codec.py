"""
XML-RPC call codec

Decodes methodCall envelopes into Call values whose parameters are boxed
Variants, and encodes single handler results into methodResponse envelopes.
"""

import xmlrpc.client
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Tuple
from xml.parsers.expat import ExpatError


class VariantType(Enum):
    """XML-RPC value tags a decoded parameter can carry"""
    STRING = "string"
    BOOLEAN = "boolean"
    INT = "int"
    DOUBLE = "double"
    BASE64 = "base64"
    DATETIME = "dateTime.iso8601"
    ARRAY = "array"
    STRUCT = "struct"
    NIL = "nil"


class DecodeErrorReason(Enum):
    MALFORMED_ENVELOPE = "malformed_envelope"
    MALFORMED_PARAMETER = "malformed_parameter"


class EncodeErrorReason(Enum):
    UNSUPPORTED_VALUE = "unsupported_value"


class CodecError(ValueError):
    """Base class for wire format errors"""

    def __init__(self, reason: Enum, message: str):
        super().__init__(message)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.args[0]}"


class DecodeError(CodecError):
    """Raised when a payload or one of its parameters has the wrong shape"""


class EncodeError(CodecError):
    """Raised when a value cannot be written to the wire"""


class RemoteFault(Exception):
    """An XML-RPC fault returned by the remote end"""

    def __init__(self, code: int, message: str):
        super().__init__(f"Fault {code}: {message}")
        self.code = code
        self.message = message


@dataclass(frozen=True)
class Variant:
    """A parameter value tagged with its wire type.

    Arrays and structs box their members too, so every level needs exactly
    one unwrap step.
    """
    type: VariantType
    value: Any

    def unwrap(self, expected: VariantType) -> Any:
        """Return the boxed value if it has the expected type

        Raises:
            DecodeError: MALFORMED_PARAMETER on a type mismatch
        """
        if self.type is not expected:
            raise DecodeError(
                DecodeErrorReason.MALFORMED_PARAMETER,
                f"expected {expected.value}, got {self.type.value}",
            )
        return self.value


@dataclass(frozen=True)
class Call:
    """One decoded request"""
    method: str
    params: Tuple[Variant, ...] = field(default_factory=tuple)

    def string_param(self, index: int = 0) -> str:
        """Unbox the string parameter at ``index``

        Raises:
            DecodeError: MALFORMED_PARAMETER if the parameter is missing or
                is not a boxed string
        """
        return string_param(self.params, index)


def string_param(params: Tuple[Variant, ...], index: int = 0) -> str:
    if index >= len(params):
        raise DecodeError(
            DecodeErrorReason.MALFORMED_PARAMETER,
            f"missing parameter {index} (got {len(params)})",
        )
    return params[index].unwrap(VariantType.STRING)


def box(value: Any) -> Variant:
    """Tag a value produced by the XML-RPC parser with its wire type"""
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return Variant(VariantType.BOOLEAN, value)
    if isinstance(value, int):
        return Variant(VariantType.INT, value)
    if isinstance(value, float):
        return Variant(VariantType.DOUBLE, value)
    if isinstance(value, str):
        return Variant(VariantType.STRING, value)
    if isinstance(value, (bytes, bytearray)):
        return Variant(VariantType.BASE64, bytes(value))
    if isinstance(value, datetime):
        return Variant(VariantType.DATETIME, value)
    if isinstance(value, (list, tuple)):
        return Variant(VariantType.ARRAY, tuple(box(item) for item in value))
    if isinstance(value, dict):
        return Variant(VariantType.STRUCT, {key: box(item) for key, item in value.items()})
    if value is None:
        return Variant(VariantType.NIL, None)
    raise DecodeError(
        DecodeErrorReason.MALFORMED_ENVELOPE,
        f"unsupported value type: {type(value).__name__}",
    )


def _loads(raw: bytes) -> Tuple[tuple, Any]:
    # IndexError comes from a struct member without a value
    try:
        return xmlrpc.client.loads(raw, use_builtin_types=True)
    except (ExpatError, xmlrpc.client.ResponseError, ValueError, TypeError, IndexError) as e:
        raise DecodeError(DecodeErrorReason.MALFORMED_ENVELOPE, str(e) or type(e).__name__) from e


def decode(raw: bytes) -> Call:
    """Decode a methodCall envelope

    Args:
        raw: Request body

    Returns:
        Call: Method name and boxed parameters

    Raises:
        DecodeError: MALFORMED_ENVELOPE if the payload is not a well-formed
            methodCall
    """
    if not raw:
        raise DecodeError(DecodeErrorReason.MALFORMED_ENVELOPE, "empty payload")

    try:
        params, method = _loads(raw)
    except xmlrpc.client.Fault as e:
        raise DecodeError(
            DecodeErrorReason.MALFORMED_ENVELOPE, "fault envelope is not a call"
        ) from e

    if not method:
        raise DecodeError(DecodeErrorReason.MALFORMED_ENVELOPE, "no method name")

    try:
        boxed = tuple(box(param) for param in params)
    except RecursionError as e:
        raise DecodeError(DecodeErrorReason.MALFORMED_ENVELOPE, "values nested too deeply") from e

    return Call(method=method, params=boxed)


def encode(value: Any) -> bytes:
    """Encode a single handler result as a methodResponse envelope

    Only strings and booleans are supported.

    Raises:
        EncodeError: UNSUPPORTED_VALUE for any other type
    """
    if not isinstance(value, (str, bool)):
        raise EncodeError(
            EncodeErrorReason.UNSUPPORTED_VALUE,
            f"cannot encode {type(value).__name__}",
        )
    return xmlrpc.client.dumps((value,), methodresponse=True).encode("utf-8")


def encode_call(method: str, params: Iterable[Any] = ()) -> bytes:
    """Encode a methodCall envelope (client side)"""
    try:
        return xmlrpc.client.dumps(tuple(params), methodname=method).encode("utf-8")
    except TypeError as e:
        raise EncodeError(EncodeErrorReason.UNSUPPORTED_VALUE, str(e)) from e


def decode_response(raw: bytes) -> Any:
    """Decode a methodResponse envelope into its single value (client side)

    Raises:
        RemoteFault: The server answered with a fault
        DecodeError: MALFORMED_ENVELOPE on anything that is not a
            single-value response
    """
    if not raw:
        raise DecodeError(DecodeErrorReason.MALFORMED_ENVELOPE, "empty payload")

    try:
        params, method = _loads(raw)
    except xmlrpc.client.Fault as e:
        raise RemoteFault(e.faultCode, e.faultString) from e

    if method is not None or len(params) != 1:
        raise DecodeError(DecodeErrorReason.MALFORMED_ENVELOPE, "not a single-value response")

    return params[0]
