"""
Tests for server configuration
"""
import os
from unittest.mock import patch

import pytest

from winrpc.config import (
    DEFAULT_MAX_REQUEST_BYTES,
    ServerConfig,
    TelemetryConfig,
    TransportType,
)


class TestServerConfig:
    """Test server configuration"""

    def test_default_values(self):
        config = ServerConfig.default()
        assert config.transport is TransportType.HTTP
        assert config.host == "0.0.0.0"
        assert config.port == 8082
        assert config.max_workers == 10
        assert config.max_request_bytes == DEFAULT_MAX_REQUEST_BYTES
        assert config.identifier_prefix == "w"
        assert config.telemetry.enable_tracing is False
        assert config.telemetry.enable_metrics is False

    def test_transport_from_string(self):
        assert ServerConfig(transport="ZeroMQ").transport is TransportType.ZEROMQ

    def test_invalid_transport(self):
        with pytest.raises(ValueError, match="Unsupported transport"):
            ServerConfig(transport="carrier-pigeon")

    @pytest.mark.parametrize("port", [-1, 70000])
    def test_invalid_port(self, port):
        with pytest.raises(ValueError, match="Invalid port"):
            ServerConfig(port=port)

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            ServerConfig(max_workers=0)

    def test_from_env(self):
        with patch.dict(os.environ, {
            "WINRPC_TRANSPORT": "zeromq",
            "WINRPC_HOST": "127.0.0.1",
            "WINRPC_PORT": "9000",
            "WINRPC_WORKERS": "4",
            "WINRPC_ID_PREFIX": "win",
            "WINRPC_LOG_LEVEL": "debug",
            "WINRPC_TRACING": "true",
            "WINRPC_TELEMETRY_EXPORTER": "console",
        }):
            config = ServerConfig.from_env()
            assert config.transport is TransportType.ZEROMQ
            assert config.host == "127.0.0.1"
            assert config.port == 9000
            assert config.max_workers == 4
            assert config.identifier_prefix == "win"
            assert config.log_level == "DEBUG"
            assert config.telemetry.enable_tracing is True
            assert config.telemetry.exporter == "console"

    def test_from_env_invalid_integer(self):
        with patch.dict(os.environ, {"WINRPC_PORT": "eighty"}):
            with pytest.raises(ValueError, match="WINRPC_PORT"):
                ServerConfig.from_env()

    def test_from_env_invalid_boolean(self):
        with patch.dict(os.environ, {"WINRPC_METRICS": "maybe"}):
            with pytest.raises(ValueError, match="WINRPC_METRICS"):
                ServerConfig.from_env()

    def test_zeromq_address(self):
        assert ServerConfig(port=5555).zeromq_address == "tcp://*:5555"
        assert ServerConfig(host="127.0.0.1", port=0).zeromq_address == "tcp://127.0.0.1:0"

    def test_to_dict(self):
        config_dict = ServerConfig(transport=TransportType.ZEROMQ).to_dict()
        assert config_dict["transport"] == "zeromq"
        assert config_dict["port"] == 8082
        assert config_dict["enable_tracing"] is False


class TestTelemetryConfig:
    """Test telemetry configuration"""

    def test_invalid_exporter(self):
        with patch.dict(os.environ, {"WINRPC_TELEMETRY_EXPORTER": "jaeger"}):
            with pytest.raises(ValueError, match="exporter"):
                TelemetryConfig.from_env()

    def test_defaults(self):
        config = TelemetryConfig()
        assert config.exporter == "otlp"
        assert config.otlp_endpoint == "localhost:4317"
        assert config.service_name == "winrpc"
