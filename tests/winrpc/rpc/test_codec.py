"""
Tests for the XML-RPC call codec
"""
import xmlrpc.client
from datetime import datetime

import pytest

from winrpc.rpc.codec import (
    Call,
    DecodeError,
    DecodeErrorReason,
    EncodeError,
    EncodeErrorReason,
    RemoteFault,
    Variant,
    VariantType,
    box,
    decode,
    decode_response,
    encode,
    encode_call,
)

DELETE_CALL = (
    b"<?xml version='1.0'?>"
    b"<methodCall><methodName>window.delete</methodName>"
    b"<params><param><value><string>w1</string></value></param></params>"
    b"</methodCall>"
)

MEMBER_WITHOUT_VALUE = (
    b"<methodCall><methodName>window.delete</methodName><params><param>"
    b"<value><struct><member><name>a</name></member></struct></value>"
    b"</param></params></methodCall>"
)

DEEP_NESTING = 3000
DEEPLY_NESTED_ARRAY = (
    b"<methodCall><methodName>window.delete</methodName><params><param>"
    + b"<value><array><data>" * DEEP_NESTING
    + b"</data></array></value>" * DEEP_NESTING
    + b"</param></params></methodCall>"
)


class TestDecode:
    """Test request decoding"""

    def test_decode_call_with_string_param(self):
        call = decode(DELETE_CALL)
        assert call.method == "window.delete"
        assert call.params == (Variant(VariantType.STRING, "w1"),)
        assert call.string_param(0) == "w1"

    def test_decode_call_without_params(self):
        call = decode(b"<methodCall><methodName>window.make</methodName></methodCall>")
        assert call == Call("window.make", ())

    def test_untyped_value_is_a_string(self):
        payload = (
            b"<methodCall><methodName>window.delete</methodName>"
            b"<params><param><value>w7</value></param></params></methodCall>"
        )
        assert decode(payload).string_param(0) == "w7"

    def test_decode_boxes_every_type(self, make_call):
        stamp = datetime(2024, 1, 2, 3, 4, 5)
        payload = make_call(
            "m", True, 7, 1.5, b"raw", stamp, ["a", 1], {"k": False}
        )
        call = decode(payload)
        assert [p.type for p in call.params] == [
            VariantType.BOOLEAN,
            VariantType.INT,
            VariantType.DOUBLE,
            VariantType.BASE64,
            VariantType.DATETIME,
            VariantType.ARRAY,
            VariantType.STRUCT,
        ]
        assert call.params[3].value == b"raw"
        assert call.params[4].value == stamp
        assert call.params[5].value == (
            Variant(VariantType.STRING, "a"),
            Variant(VariantType.INT, 1),
        )
        assert call.params[6].value == {"k": Variant(VariantType.BOOLEAN, False)}

    @pytest.mark.parametrize("payload", [
        b"",
        b"not xml at all",
        DELETE_CALL[:60],
        b"<methodCall/>",
        b"<foo><bar/></foo>",
        b"<methodCall><params></params></methodCall>",
        b"<methodCall><methodName>m</methodName><params><param>"
        b"<value><int>abc</int></value></param></params></methodCall>",
        pytest.param(MEMBER_WITHOUT_VALUE, id="member-without-value"),
        pytest.param(DEEPLY_NESTED_ARRAY, id="deeply-nested-array"),
    ])
    def test_malformed_envelope(self, payload):
        with pytest.raises(DecodeError) as excinfo:
            decode(payload)
        assert excinfo.value.reason is DecodeErrorReason.MALFORMED_ENVELOPE

    def test_response_envelope_is_not_a_call(self):
        payload = xmlrpc.client.dumps(("w1",), methodresponse=True).encode()
        with pytest.raises(DecodeError) as excinfo:
            decode(payload)
        assert excinfo.value.reason is DecodeErrorReason.MALFORMED_ENVELOPE

    def test_fault_envelope_is_not_a_call(self):
        payload = xmlrpc.client.dumps(xmlrpc.client.Fault(1, "boom")).encode()
        with pytest.raises(DecodeError):
            decode(payload)


class TestParameters:
    """Test boxed parameter access"""

    def test_string_param_rejects_other_types(self):
        call = Call("window.delete", (box(42),))
        with pytest.raises(DecodeError) as excinfo:
            call.string_param(0)
        assert excinfo.value.reason is DecodeErrorReason.MALFORMED_PARAMETER

    def test_string_param_rejects_missing_param(self):
        with pytest.raises(DecodeError) as excinfo:
            Call("window.delete").string_param(0)
        assert excinfo.value.reason is DecodeErrorReason.MALFORMED_PARAMETER

    def test_array_of_strings_is_not_a_string(self):
        call = Call("window.delete", (box(["w1"]),))
        with pytest.raises(DecodeError):
            call.string_param(0)

    def test_bool_boxes_as_boolean_not_int(self):
        assert box(True).type is VariantType.BOOLEAN
        assert box(1).type is VariantType.INT

    def test_box_rejects_unknown_types(self):
        with pytest.raises(DecodeError):
            box(object())


class TestEncode:
    """Test response encoding"""

    def test_encode_string(self, read_response):
        payload = encode("w1")
        assert b"<methodResponse>" in payload
        assert read_response(payload) == "w1"

    def test_encode_boolean(self, read_response):
        assert read_response(encode(True)) is True
        assert read_response(encode(False)) is False

    @pytest.mark.parametrize("value", [1, 1.5, None, ["w1"], {"a": "b"}, b"raw"])
    def test_unsupported_values(self, value):
        with pytest.raises(EncodeError) as excinfo:
            encode(value)
        assert excinfo.value.reason is EncodeErrorReason.UNSUPPORTED_VALUE

    def test_error_message_names_reason(self):
        with pytest.raises(EncodeError, match="unsupported_value"):
            encode(3)


class TestClientSide:
    """Test the client half of the codec"""

    def test_encode_call_decodes_on_server(self):
        call = decode(encode_call("window.delete", ["w3"]))
        assert call.method == "window.delete"
        assert call.string_param(0) == "w3"

    def test_encode_call_rejects_unmarshallable_params(self):
        with pytest.raises(EncodeError):
            encode_call("window.delete", [object()])

    def test_decode_response(self):
        assert decode_response(encode("-1")) == "-1"

    def test_decode_response_fault(self):
        payload = xmlrpc.client.dumps(xmlrpc.client.Fault(4, "nope")).encode()
        with pytest.raises(RemoteFault) as excinfo:
            decode_response(payload)
        assert excinfo.value.code == 4
        assert excinfo.value.message == "nope"

    def test_decode_response_rejects_calls(self, make_call):
        with pytest.raises(DecodeError):
            decode_response(make_call("window.make"))

    def test_decode_response_rejects_empty(self):
        with pytest.raises(DecodeError):
            decode_response(b"")
