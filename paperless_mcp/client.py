"""Async Paperless-ngx REST API client."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from paperless_mcp.exceptions import (
    PaperlessAuthenticationError,
    PaperlessConnectionError,
    PaperlessError,
    PaperlessNotFoundError,
    PaperlessServerError,
    PaperlessValidationError,
)

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

type JSON = dict[str, Any] | list[Any]


class PaperlessClient:
    """Typed façade over the Paperless-ngx REST API.

    The client holds no state besides its immutable configuration and the
    underlying connection pool, so a single instance is shared by all sessions.
    """

    def __init__(self, base_url: str, token: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Token {token}", "Accept": "application/json"},
            timeout=timeout,
        )

    async def __aenter__(self) -> PaperlessClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _handle_error(self, response: httpx.Response) -> None:
        status = response.status_code
        body = response.text
        detail = f"{response.request.method} {response.request.url.path} returned {status}"
        if body:
            detail = f"{detail}: {body[:500]}"

        match status:
            case 401 | 403:
                raise PaperlessAuthenticationError(detail, status, body)
            case 404:
                raise PaperlessNotFoundError(detail, status, body)
            case 400 | 422:
                raise PaperlessValidationError(detail, status, body)
            case s if s >= 500:
                raise PaperlessServerError(detail, status, body)
            case _:
                raise PaperlessError(detail, status, body)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: JSON | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Execute a request and map failures onto the exception hierarchy."""
        logger.debug(f"Paperless request: {method} {path} params={params}")
        try:
            response = await self._client.request(method, path, params=params, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise PaperlessConnectionError(f"{method} {path} timed out after {self.timeout}s") from e
        except httpx.TransportError as e:
            raise PaperlessConnectionError(f"{method} {path} failed: {e}") from e

        if not response.is_success:
            self._handle_error(response)
        return response

    async def _get(self, path: str, params: list[tuple[str, str]] | None = None) -> Any:
        response = await self._request("GET", path, params=params)
        return response.json()

    async def _post(self, path: str, data: JSON | None = None) -> Any:
        response = await self._request("POST", path, json=data)
        return response.json() if response.content else None

    async def _patch(self, path: str, data: JSON) -> Any:
        response = await self._request("PATCH", path, json=data)
        return response.json()

    async def _delete(self, path: str) -> None:
        await self._request("DELETE", path)

    async def _list(self, path: str) -> list[Any]:
        payload = await self._get(path)
        if isinstance(payload, dict):
            return payload.get("results", [])
        return payload

    # Documents

    async def search_documents(
        self,
        query: str | None = None,
        limit: int | None = None,
        ordering: str | None = None,
        document_type: int | None = None,
        correspondent: int | None = None,
        tags: list[int] | None = None,
    ) -> dict[str, Any]:
        """Search documents, returning the raw paginated response."""
        params: list[tuple[str, str]] = []
        if query:
            params.append(("query", query))
        if limit:
            params.append(("page_size", str(limit)))
        if ordering:
            params.append(("ordering", ordering))
        if document_type:
            params.append(("document_type__id", str(document_type)))
        if correspondent:
            params.append(("correspondent__id", str(correspondent)))
        for tag in tags or []:
            params.append(("tags__id__in", str(tag)))

        return await self._get("/api/documents/", params=params)

    async def get_document(self, document_id: int) -> dict[str, Any]:
        return await self._get(f"/api/documents/{document_id}/")

    async def get_document_content(self, document_id: int) -> str:
        """Get the OCR text of a document.

        Falls back to the ``content`` field of the document itself when the
        content endpoint is unavailable.
        """
        try:
            response = await self._request(
                "GET", f"/api/documents/{document_id}/content/", headers={"Accept": "text/plain"}
            )
            return response.text
        except PaperlessError as e:
            logger.warning(f"Failed to get content for document {document_id}: {e}")

        document = await self.get_document(document_id)
        return document.get("content") or "Content not available"

    async def update_document(self, document_id: int, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/documents/{document_id}/", updates)

    async def delete_document(self, document_id: int) -> None:
        await self._delete(f"/api/documents/{document_id}/")

    async def get_document_suggestions(self, document_id: int) -> dict[str, Any]:
        return await self._get(f"/api/documents/{document_id}/suggestions/")

    async def get_document_metadata(self, document_id: int) -> dict[str, Any]:
        return await self._get(f"/api/documents/{document_id}/metadata/")

    def get_download_url(self, document_id: int) -> str:
        """Build the download URL; the caller must add auth headers to fetch it."""
        return f"{self.base_url}/api/documents/{document_id}/download/"

    async def bulk_update_documents(self, documents: list[dict[str, Any]]) -> dict[str, Any]:
        """Update several documents with independent, concurrent PATCH calls.

        Paperless-ngx has no bulk field update endpoint, so every item is sent
        on its own. Failures never abort the other updates.
        """

        async def update_one(item: dict[str, Any]) -> dict[str, Any]:
            updates = {key: value for key, value in item.items() if key != "id"}
            return await self.update_document(item["id"], updates)

        results = await asyncio.gather(*(update_one(item) for item in documents), return_exceptions=True)

        failed_updates: list[dict[str, Any]] = []
        updated_count = 0
        for item, result in zip(documents, results, strict=True):
            if isinstance(result, BaseException):
                failed_updates.append({"id": item["id"], "error": str(result) or "Unknown error"})
            else:
                updated_count += 1

        return {"updated_count": updated_count, "failed_updates": failed_updates}

    # Tags

    async def list_tags(self) -> list[dict[str, Any]]:
        return await self._list("/api/tags/")

    async def get_tag(self, tag_id: int) -> dict[str, Any]:
        return await self._get(f"/api/tags/{tag_id}/")

    async def create_tag(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/tags/", data)

    async def update_tag(self, tag_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/tags/{tag_id}/", data)

    async def delete_tag(self, tag_id: int) -> None:
        await self._delete(f"/api/tags/{tag_id}/")

    # Correspondents

    async def list_correspondents(self) -> list[dict[str, Any]]:
        return await self._list("/api/correspondents/")

    async def get_correspondent(self, correspondent_id: int) -> dict[str, Any]:
        return await self._get(f"/api/correspondents/{correspondent_id}/")

    async def create_correspondent(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/correspondents/", data)

    async def update_correspondent(self, correspondent_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/correspondents/{correspondent_id}/", data)

    async def delete_correspondent(self, correspondent_id: int) -> None:
        await self._delete(f"/api/correspondents/{correspondent_id}/")

    # Document types

    async def list_document_types(self) -> list[dict[str, Any]]:
        return await self._list("/api/document_types/")

    async def get_document_type(self, document_type_id: int) -> dict[str, Any]:
        return await self._get(f"/api/document_types/{document_type_id}/")

    async def create_document_type(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/document_types/", data)

    async def update_document_type(self, document_type_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/document_types/{document_type_id}/", data)

    async def delete_document_type(self, document_type_id: int) -> None:
        await self._delete(f"/api/document_types/{document_type_id}/")

    # Storage paths

    async def list_storage_paths(self) -> list[dict[str, Any]]:
        return await self._list("/api/storage_paths/")

    async def get_storage_path(self, storage_path_id: int) -> dict[str, Any]:
        return await self._get(f"/api/storage_paths/{storage_path_id}/")

    async def create_storage_path(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/storage_paths/", data)

    async def update_storage_path(self, storage_path_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/storage_paths/{storage_path_id}/", data)

    async def delete_storage_path(self, storage_path_id: int) -> None:
        await self._delete(f"/api/storage_paths/{storage_path_id}/")

    # Custom fields

    async def list_custom_fields(self) -> list[dict[str, Any]]:
        return await self._list("/api/custom_fields/")

    async def get_custom_field(self, custom_field_id: int) -> dict[str, Any]:
        return await self._get(f"/api/custom_fields/{custom_field_id}/")

    async def create_custom_field(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/custom_fields/", data)

    async def update_custom_field(self, custom_field_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/custom_fields/{custom_field_id}/", data)

    async def delete_custom_field(self, custom_field_id: int) -> None:
        await self._delete(f"/api/custom_fields/{custom_field_id}/")

    # Saved views

    async def list_saved_views(self) -> list[dict[str, Any]]:
        return await self._list("/api/saved_views/")

    async def get_saved_view(self, saved_view_id: int) -> dict[str, Any]:
        return await self._get(f"/api/saved_views/{saved_view_id}/")

    async def create_saved_view(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/api/saved_views/", data)

    async def update_saved_view(self, saved_view_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._patch(f"/api/saved_views/{saved_view_id}/", data)

    async def delete_saved_view(self, saved_view_id: int) -> None:
        await self._delete(f"/api/saved_views/{saved_view_id}/")

    # Tasks, statistics and logs

    async def list_tasks(self) -> list[dict[str, Any]]:
        return await self._list("/api/tasks/")

    async def acknowledge_task(self, task_id: int) -> Any:
        return await self._post(f"/api/tasks/{task_id}/acknowledge/")

    async def get_statistics(self) -> dict[str, Any]:
        return await self._get("/api/statistics/")

    async def get_logs(self) -> list[Any]:
        return await self._get("/api/logs/")
