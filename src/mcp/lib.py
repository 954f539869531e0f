"""Server configuration for the form-builder MCP server.

A ``ServerConfig`` says how the server is exposed; ``run_kwargs()`` turns it
into the keyword arguments ``FastMCP.run`` expects for that transport.
"""

from dataclasses import dataclass
from enum import Enum
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from src.config import EnvVar, get_environment

DISTRIBUTION_NAME = "form-builder"


class TransportType(str, Enum):
    """Supported MCP transport types."""

    STDIO = "stdio"
    HTTP = "http"
    SSE = "sse"


@dataclass
class ServerConfig:
    """How the MCP server is exposed.

    Attributes:
        name: Server display name.
        transport: Transport type for communication.
        host: Bind address for HTTP/SSE transports.
        port: Port for HTTP/SSE transports.
        path: URL path for HTTP transport.
    """

    name: str = "form-builder"
    transport: TransportType = TransportType.STDIO
    host: str = "0.0.0.0"
    port: int = 18080
    path: str = "/mcp"

    @classmethod
    def from_env(
        cls,
        transport: TransportType | str | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "ServerConfig":
        """Build a config, letting explicit arguments win over MCP_HOST/MCP_PORT.

        Args:
            transport: Transport type or its value (default: STDIO).
            host: Bind address override.
            port: Port override.
        """
        return cls(
            transport=TransportType(transport or TransportType.STDIO),
            host=get_environment(EnvVar.MCP_HOST, override=host),
            port=get_environment(EnvVar.MCP_PORT, override=port),
        )

    @property
    def url(self) -> str | None:
        """Where network clients connect, or None for STDIO."""
        if self.transport == TransportType.STDIO:
            return None
        if self.transport == TransportType.HTTP:
            return f"http://{self.host}:{self.port}{self.path}"
        return f"http://{self.host}:{self.port}"

    def run_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``FastMCP.run`` under this transport."""
        if self.transport == TransportType.STDIO:
            return {}
        kwargs: dict[str, Any] = {
            "transport": self.transport.value,
            "host": self.host,
            "port": self.port,
        }
        if self.transport == TransportType.HTTP:
            kwargs["path"] = self.path
        return kwargs


def get_server_version() -> str:
    """Installed package version, or the source tree version when not installed."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0.1.0"


__all__ = [
    "TransportType",
    "ServerConfig",
    "get_server_version",
]
