"""
Shared fixtures for the window RPC tests
"""

import xmlrpc.client

import pytest

from winrpc.rpc.dispatcher import Dispatcher
from winrpc.rpc.methods import build_method_table
from winrpc.rpc.registry import WindowRegistry
from winrpc.toolkit.headless import HeadlessToolkit


def _make_call(method, *params):
    return xmlrpc.client.dumps(params, methodname=method).encode("utf-8")


def _read_response(payload):
    params, _ = xmlrpc.client.loads(payload)
    return params[0]


@pytest.fixture
def make_call():
    """Encode a methodCall envelope the way an external client would"""
    return _make_call


@pytest.fixture
def read_response():
    """Decode a methodResponse envelope into its single value"""
    return _read_response


@pytest.fixture
def toolkit():
    return HeadlessToolkit()


@pytest.fixture
def registry(toolkit):
    return WindowRegistry(toolkit)


@pytest.fixture
def method_table(registry, toolkit):
    return build_method_table(registry, toolkit)


@pytest.fixture
def dispatcher(method_table):
    return Dispatcher(method_table)
