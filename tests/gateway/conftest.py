"""Fixtures for gateway tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest
from fastapi.testclient import TestClient

from paperless_mcp.catalog import ToolCatalog
from paperless_mcp.gateway import Gateway, ProtocolHandler, SessionRegistry, create_app
from paperless_mcp.resources import DocumentResources

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator
    from unittest.mock import AsyncMock

    from fastapi import FastAPI


@pytest.fixture
def gateway(mock_client: AsyncMock) -> Gateway:
    protocol = ProtocolHandler(
        ToolCatalog.from_client(mock_client), DocumentResources(mock_client), server_version="1.1.2"
    )
    return Gateway(registry=SessionRegistry(), protocol=protocol)


@pytest.fixture
def app(gateway: Gateway) -> FastAPI:
    return create_app(gateway, version="1.1.2")


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://gateway.test") as client:
        yield client


def rpc(method: str, params: dict | None = None, request_id: int | None = 1) -> dict:
    message: dict = {"jsonrpc": "2.0", "method": method}
    if params is not None:
        message["params"] = params
    if request_id is not None:
        message["id"] = request_id
    return message


@pytest.fixture
def make_rpc():
    return rpc
