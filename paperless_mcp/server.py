#!/usr/bin/env python3
"""Paperless MCP Server

Exposes Paperless-ngx documents and metadata to MCP clients over stdio, the
stateless HTTP transport or the duplex server-sent-events transport.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import uvicorn
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from paperless_mcp import __version__
from paperless_mcp.catalog import ToolCatalog
from paperless_mcp.client import PaperlessClient
from paperless_mcp.config import load_config
from paperless_mcp.exceptions import ConfigurationError
from paperless_mcp.gateway import Gateway, ProtocolHandler, SessionRegistry, create_app
from paperless_mcp.gateway.protocol import SERVER_NAME
from paperless_mcp.logging_config import setup_logging
from paperless_mcp.resources import MIME_TYPE, DocumentResources

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from fastapi import FastAPI
    from mcp.types import CallToolResult, Resource, Tool
    from pydantic import AnyUrl

    from paperless_mcp.config import ServerConfig

logger = logging.getLogger(__name__)


class PaperlessMCPServer:
    """Composition root: one client, one catalog and one session registry per process."""

    def __init__(self, config: ServerConfig, client: PaperlessClient | None = None) -> None:
        self.config = config
        self.client = client or PaperlessClient(config.paperless_url, config.paperless_token, timeout=config.timeout)
        self.catalog = ToolCatalog.from_client(self.client)
        self.resources = DocumentResources(self.client)
        self.registry = SessionRegistry()
        self.protocol = ProtocolHandler(self.catalog, self.resources, server_version=__version__)

        logger.info(f"Paperless MCP Server configured for {config.paperless_url} with {len(self.catalog)} tools")

    def create_stdio_server(self) -> Server:
        """Build the SDK server used by the stdio transport."""
        server = Server(SERVER_NAME, version=__version__)

        @server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.catalog.list_tools()

        @server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict) -> CallToolResult:
            return await self.catalog.call(name, arguments)

        @server.list_resources()
        async def list_resources() -> list[Resource]:
            return await self.resources.list_resources()

        @server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            contents = await self.resources.read_resource(str(uri))
            return [ReadResourceContents(content=contents.text, mime_type=MIME_TYPE)]

        return server

    def create_app(self) -> FastAPI:
        return create_app(
            Gateway(registry=self.registry, protocol=self.protocol),
            stateless_enabled=self.config.stateless_enabled,
            duplex_enabled=self.config.duplex_enabled,
            allowed_origins=self.config.allowed_origins,
            version=__version__,
            on_shutdown=self.client.aclose,
        )

    async def run_stdio(self) -> None:
        server = self.create_stdio_server()
        try:
            async with stdio_server() as (read_stream, write_stream):
                logger.info("Paperless MCP Server running on stdio")
                await server.run(read_stream, write_stream, server.create_initialization_options())
        finally:
            await self.client.aclose()

    def run_http(self) -> None:
        app = self.create_app()
        endpoints = []
        if self.config.stateless_enabled:
            endpoints.append("/api")
        if self.config.duplex_enabled:
            endpoints.extend(["/mcp", "/message"])
        logger.info(
            f"Paperless MCP Server listening on http://{self.config.host}:{self.config.port} "
            f"(endpoints: {', '.join(endpoints)}, health: /health)"
        )
        uvicorn.run(app, host=self.config.host, port=self.config.port, log_config=None)

    def run(self) -> None:
        if self.config.transport == "stdio":
            asyncio.run(self.run_stdio())
        else:
            self.run_http()


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the ``paperless-mcp`` console script."""
    try:
        config = load_config(argv)
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    setup_logging(log_level=config.log_level, log_file=config.log_file)

    try:
        PaperlessMCPServer(config).run()
    except KeyboardInterrupt:
        logger.info("Paperless MCP Server stopped")


if __name__ == "__main__":
    main()
