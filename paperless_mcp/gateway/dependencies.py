"""FastAPI dependencies for the MCP gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from paperless_mcp.gateway.protocol import ProtocolHandler
    from paperless_mcp.gateway.sessions import SessionRegistry

SESSION_HEADER = "Mcp-Session-Id"
PROTOCOL_VERSION_HEADER = "MCP-Protocol-Version"


@dataclass
class Gateway:
    """Session registry and protocol handler shared by both HTTP transports."""

    registry: SessionRegistry
    protocol: ProtocolHandler


def get_gateway(request: Request) -> Gateway:
    """Dependency returning the gateway stored on the application state."""
    return request.app.state.gateway
