"""HTTP transports of the Paperless MCP server."""

from __future__ import annotations

from paperless_mcp.gateway.app import create_app
from paperless_mcp.gateway.dependencies import Gateway
from paperless_mcp.gateway.protocol import ProtocolHandler
from paperless_mcp.gateway.sessions import SessionRegistry

__all__ = ["Gateway", "ProtocolHandler", "SessionRegistry", "create_app"]
