"""
Configuration settings for the window RPC server
"""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

DEFAULT_PORT = 8082
DEFAULT_MAX_REQUEST_BYTES = 10 * 1024 * 1024  # 10MB

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


class TransportType(Enum):
    """Supported transports"""
    HTTP = "http"
    ZEROMQ = "zeromq"

    @classmethod
    def parse(cls, value: str) -> "TransportType":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unsupported transport: {value}") from None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value}")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {value}") from None


@dataclass
class TelemetryConfig:
    """Configuration for OpenTelemetry export"""
    enable_tracing: bool = False
    enable_metrics: bool = False
    exporter: str = "otlp"  # otlp, console
    otlp_endpoint: str = "localhost:4317"
    export_interval_ms: int = 5000
    service_name: str = "winrpc"

    @classmethod
    def from_env(cls) -> "TelemetryConfig":
        """Create config from environment variables"""
        config = cls(
            enable_tracing=_env_bool("WINRPC_TRACING", False),
            enable_metrics=_env_bool("WINRPC_METRICS", False),
            exporter=os.getenv("WINRPC_TELEMETRY_EXPORTER", "otlp"),
            otlp_endpoint=os.getenv("WINRPC_OTLP_ENDPOINT", "localhost:4317"),
            export_interval_ms=_env_int("WINRPC_EXPORT_INTERVAL_MS", 5000),
            service_name=os.getenv("WINRPC_SERVICE_NAME", "winrpc"),
        )
        if config.exporter not in ("otlp", "console"):
            raise ValueError(f"Unsupported telemetry exporter: {config.exporter}")
        return config


@dataclass
class ServerConfig:
    """Main configuration for the window RPC server"""
    transport: TransportType = TransportType.HTTP
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT  # 0 binds an ephemeral port
    max_workers: int = 10  # ZeroMQ request worker threads
    max_request_bytes: int = DEFAULT_MAX_REQUEST_BYTES
    identifier_prefix: str = "w"
    log_level: str = "INFO"
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)

    def __post_init__(self):
        if isinstance(self.transport, str):
            self.transport = TransportType.parse(self.transport)
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Invalid port: {self.port}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive: {self.max_workers}")

    @classmethod
    def default(cls) -> "ServerConfig":
        """Create default configuration"""
        return cls()

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create config from environment variables"""
        return cls(
            transport=os.getenv("WINRPC_TRANSPORT", TransportType.HTTP.value),
            host=os.getenv("WINRPC_HOST", "0.0.0.0"),
            port=_env_int("WINRPC_PORT", DEFAULT_PORT),
            max_workers=_env_int("WINRPC_WORKERS", 10),
            max_request_bytes=_env_int("WINRPC_MAX_REQUEST_BYTES", DEFAULT_MAX_REQUEST_BYTES),
            identifier_prefix=os.getenv("WINRPC_ID_PREFIX", "w"),
            log_level=os.getenv("WINRPC_LOG_LEVEL", "INFO").upper(),
            telemetry=TelemetryConfig.from_env(),
        )

    @property
    def zeromq_address(self) -> str:
        """Bind address in ZeroMQ endpoint form"""
        host = "*" if self.host in ("0.0.0.0", "") else self.host
        return f"tcp://{host}:{self.port}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "transport": self.transport.value,
            "host": self.host,
            "port": self.port,
            "max_workers": self.max_workers,
            "max_request_bytes": self.max_request_bytes,
            "identifier_prefix": self.identifier_prefix,
            "log_level": self.log_level,
            "enable_tracing": self.telemetry.enable_tracing,
            "enable_metrics": self.telemetry.enable_metrics,
        }
