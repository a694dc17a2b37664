"""Tests for paperless_mcp.client module."""

from __future__ import annotations

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from paperless_mcp.client import PaperlessClient
from paperless_mcp.exceptions import (
    PaperlessAuthenticationError,
    PaperlessConnectionError,
    PaperlessError,
    PaperlessNotFoundError,
    PaperlessServerError,
    PaperlessValidationError,
)


@pytest.mark.unit
class TestClientInitialization:
    async def test_strips_trailing_slash(self) -> None:
        async with PaperlessClient("http://paperless.test/", "abc") as client:
            assert client.base_url == "http://paperless.test"
            assert client.timeout == 30.0

    async def test_sends_token_auth_header(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(url=f"{base_url}/api/statistics/", json={"documents_total": 3})

        await paperless_client.get_statistics()

        request = httpx_mock.get_request()
        assert request.headers["Authorization"] == "Token test-token-123"
        assert request.headers["Accept"] == "application/json"


@pytest.mark.unit
class TestSearchDocuments:
    async def test_query_and_limit_map_to_query_and_page_size(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(json={"count": 0, "next": None, "previous": None, "results": []})

        result = await paperless_client.search_documents(query="invoice", limit=5)

        request = httpx_mock.get_request()
        assert request.method == "GET"
        assert str(request.url) == f"{base_url}/api/documents/?query=invoice&page_size=5"
        assert result["results"] == []

    async def test_filters_and_repeated_tags(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient
    ) -> None:
        httpx_mock.add_response(json={"count": 0, "results": []})

        await paperless_client.search_documents(
            ordering="-created", document_type=2, correspondent=3, tags=[1, 4]
        )

        params = httpx_mock.get_request().url.params
        assert params["ordering"] == "-created"
        assert params["document_type__id"] == "2"
        assert params["correspondent__id"] == "3"
        assert params.get_list("tags__id__in") == ["1", "4"]
        assert "query" not in params
        assert "page_size" not in params


@pytest.mark.unit
class TestDocumentContent:
    async def test_returns_text_endpoint_body(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(url=f"{base_url}/api/documents/7/content/", text="OCR text")

        assert await paperless_client.get_document_content(7) == "OCR text"
        assert httpx_mock.get_request().headers["Accept"] == "text/plain"

    async def test_falls_back_to_document_content(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(url=f"{base_url}/api/documents/7/content/", status_code=404)
        httpx_mock.add_response(url=f"{base_url}/api/documents/7/", json={"id": 7, "content": "from document"})

        assert await paperless_client.get_document_content(7) == "from document"

    async def test_placeholder_when_no_content(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(url=f"{base_url}/api/documents/7/content/", status_code=500)
        httpx_mock.add_response(url=f"{base_url}/api/documents/7/", json={"id": 7, "content": ""})

        assert await paperless_client.get_document_content(7) == "Content not available"


@pytest.mark.unit
class TestUpdateDocument:
    async def test_patch_body_is_exactly_the_given_fields(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(
            method="PATCH", url=f"{base_url}/api/documents/12/", json={"id": 12, "title": "Renamed"}
        )

        result = await paperless_client.update_document(12, {"title": "Renamed", "tags": [1]})

        assert json.loads(httpx_mock.get_request().content) == {"title": "Renamed", "tags": [1]}
        assert result["title"] == "Renamed"

    async def test_delete_document(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(method="DELETE", url=f"{base_url}/api/documents/12/", status_code=204)

        assert await paperless_client.delete_document(12) is None

    def test_download_url(self, paperless_client: PaperlessClient, base_url: str) -> None:
        assert paperless_client.get_download_url(5) == f"{base_url}/api/documents/5/download/"


@pytest.mark.unit
class TestBulkUpdateDocuments:
    async def test_reports_partial_failures_by_id(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(method="PATCH", url=f"{base_url}/api/documents/1/", json={"id": 1})
        httpx_mock.add_response(method="PATCH", url=f"{base_url}/api/documents/2/", status_code=404)
        httpx_mock.add_response(method="PATCH", url=f"{base_url}/api/documents/3/", json={"id": 3})
        httpx_mock.add_response(method="PATCH", url=f"{base_url}/api/documents/4/", status_code=400, text="bad")

        result = await paperless_client.bulk_update_documents(
            [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}, {"id": 3, "tags": [1]}, {"id": 4, "title": "d"}]
        )

        assert result["updated_count"] == 2
        assert [failure["id"] for failure in result["failed_updates"]] == [2, 4]
        assert all(failure["error"] for failure in result["failed_updates"])

    async def test_id_is_not_part_of_the_patch_body(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(method="PATCH", url=f"{base_url}/api/documents/9/", json={"id": 9})

        await paperless_client.bulk_update_documents([{"id": 9, "correspondent": 4}])

        assert json.loads(httpx_mock.get_request().content) == {"correspondent": 4}


@pytest.mark.unit
class TestMetadataEndpoints:
    async def test_list_unwraps_paginated_results(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(url=f"{base_url}/api/tags/", json={"count": 1, "results": [{"id": 1, "name": "A"}]})

        assert await paperless_client.list_tags() == [{"id": 1, "name": "A"}]

    async def test_create_correspondent_posts_body(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(
            method="POST", url=f"{base_url}/api/correspondents/", status_code=201, json={"id": 5, "name": "ACME"}
        )

        result = await paperless_client.create_correspondent({"name": "ACME"})

        assert json.loads(httpx_mock.get_request().content) == {"name": "ACME"}
        assert result["id"] == 5

    async def test_acknowledge_task_without_body(
        self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient, base_url: str
    ) -> None:
        httpx_mock.add_response(method="POST", url=f"{base_url}/api/tasks/3/acknowledge/", status_code=204)

        assert await paperless_client.acknowledge_task(3) is None


@pytest.mark.unit
class TestErrorMapping:
    @pytest.mark.parametrize(
        ("status_code", "exception"),
        [
            (401, PaperlessAuthenticationError),
            (403, PaperlessAuthenticationError),
            (404, PaperlessNotFoundError),
            (400, PaperlessValidationError),
            (422, PaperlessValidationError),
            (500, PaperlessServerError),
            (503, PaperlessServerError),
            (409, PaperlessError),
        ],
    )
    async def test_status_codes(
        self,
        httpx_mock: HTTPXMock,
        paperless_client: PaperlessClient,
        base_url: str,
        status_code: int,
        exception: type[PaperlessError],
    ) -> None:
        httpx_mock.add_response(url=f"{base_url}/api/documents/1/", status_code=status_code, text="boom")

        with pytest.raises(exception) as exc_info:
            await paperless_client.get_document(1)

        assert exc_info.value.status_code == status_code
        assert exc_info.value.response_body == "boom"
        assert "GET /api/documents/1/ returned" in str(exc_info.value)

    async def test_transport_failure(self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        with pytest.raises(PaperlessConnectionError, match="Connection refused"):
            await paperless_client.get_document(1)

    async def test_timeout(self, httpx_mock: HTTPXMock, paperless_client: PaperlessClient) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("Timed out"))

        with pytest.raises(PaperlessConnectionError, match="timed out after 30.0s"):
            await paperless_client.get_document(1)
