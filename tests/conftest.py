"""Shared test fixtures for paperless_mcp tests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock

import pytest

from paperless_mcp.client import PaperlessClient

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

BASE_URL = "http://paperless.test"
TOKEN = "test-token-123"


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
async def paperless_client() -> AsyncIterator[PaperlessClient]:
    """Real client; pair with the ``httpx_mock`` fixture to stub Paperless-ngx."""
    async with PaperlessClient(BASE_URL, TOKEN) as client:
        yield client


@pytest.fixture
def mock_client() -> AsyncMock:
    """Create a mock PaperlessClient."""
    client = AsyncMock(spec=PaperlessClient)
    client.base_url = BASE_URL
    client.get_download_url = Mock(side_effect=lambda document_id: f"{BASE_URL}/api/documents/{document_id}/download/")
    return client


def make_document(**kwargs) -> dict:
    """Create a Paperless-ngx document payload with default values."""
    defaults = {
        "id": 1,
        "title": "Invoice 2024-001",
        "correspondent": 3,
        "document_type": 2,
        "tags": [1, 2],
        "created": "2024-01-15T00:00:00Z",
        "modified": "2024-01-16T10:00:00Z",
        "content": "Total due: 100 EUR",
        "archive_serial_number": None,
    }
    defaults.update(kwargs)
    return defaults


@pytest.fixture
def document_factory():
    return make_document
