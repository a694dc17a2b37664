"""Tests for paperless_mcp.server module."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from mcp import types

from paperless_mcp.config import ServerConfig
from paperless_mcp.server import PaperlessMCPServer, main

if TYPE_CHECKING:
    from unittest.mock import AsyncMock


def make_server(mock_client: AsyncMock, **env: str) -> PaperlessMCPServer:
    config = ServerConfig.from_env({"PAPERLESS_TOKEN": "secret", **env})
    return PaperlessMCPServer(config, client=mock_client)


@pytest.mark.unit
class TestPaperlessMCPServer:
    def test_wires_shared_components(self, mock_client: AsyncMock) -> None:
        server = make_server(mock_client)

        assert server.client is mock_client
        assert len(server.catalog) == 42
        assert server.protocol.catalog is server.catalog
        assert server.resources.client is mock_client
        assert len(server.registry) == 0

    async def test_stdio_call_tool(self, mock_client: AsyncMock) -> None:
        mock_client.create_tag.return_value = {"id": 1, "name": "Urgent"}
        stdio = make_server(mock_client).create_stdio_server()

        result = await stdio.request_handlers[types.CallToolRequest](
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name="create_tag", arguments={"name": "Urgent"}),
            )
        )

        assert result.root.isError is False
        assert result.root.content[0].text.startswith("Tag created successfully:")

    async def test_stdio_list_tools(self, mock_client: AsyncMock) -> None:
        stdio = make_server(mock_client).create_stdio_server()

        result = await stdio.request_handlers[types.ListToolsRequest](types.ListToolsRequest(method="tools/list"))

        assert len(result.root.tools) == 42

    async def test_stdio_read_resource(self, mock_client: AsyncMock, document_factory) -> None:
        mock_client.get_document.return_value = document_factory(id=2, title="Deed")
        mock_client.get_document_content.return_value = "text"
        stdio = make_server(mock_client).create_stdio_server()

        result = await stdio.request_handlers[types.ReadResourceRequest](
            types.ReadResourceRequest(
                method="resources/read", params=types.ReadResourceRequestParams(uri="paperless://document/2")
            )
        )

        [contents] = result.root.contents
        assert contents.mimeType == "text/plain"
        assert contents.text.startswith("Title: Deed\n")

    def test_duplex_only_app_has_no_stateless_endpoint(self, mock_client: AsyncMock) -> None:
        app = make_server(mock_client, MCP_TRANSPORT="duplex").create_app()

        with TestClient(app) as client:
            assert client.post("/api", json={"jsonrpc": "2.0", "id": 1, "method": "ping"}).status_code == 404
            assert client.get("/health").status_code == 200

    def test_app_shutdown_closes_client_and_sessions(self, mock_client: AsyncMock) -> None:
        server = make_server(mock_client, MCP_TRANSPORT="both")
        server.registry.create("stateless")

        with TestClient(server.create_app()):
            pass

        assert len(server.registry) == 0
        mock_client.aclose.assert_awaited_once()


@pytest.mark.unit
class TestMain:
    def test_missing_token_exits_with_status_one(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PAPERLESS_TOKEN", raising=False)

        with patch("paperless_mcp.server.setup_logging"), pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1

    def test_invalid_transport_exits_with_status_one(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAPERLESS_TOKEN", "secret")

        with patch("paperless_mcp.server.setup_logging"), pytest.raises(SystemExit) as exc_info:
            main(["--transport", "carrier-pigeon"])

        assert exc_info.value.code == 1

    def test_http_transport_runs_uvicorn(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAPERLESS_TOKEN", "secret")

        with (
            patch("paperless_mcp.server.setup_logging"),
            patch("paperless_mcp.server.uvicorn.run") as uvicorn_run,
        ):
            main(["--transport", "http", "--port", "3100"])

        uvicorn_run.assert_called_once()
        assert uvicorn_run.call_args.kwargs["port"] == 3100
        assert uvicorn_run.call_args.kwargs["host"] == "0.0.0.0"
