"""Document resources exposed over MCP.

Recent documents are listed as ``paperless://document/{id}`` resources and
read on demand as a plain-text block with their metadata and OCR content.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from mcp.types import Resource, TextResourceContents
from pydantic import AnyUrl

from paperless_mcp.exceptions import InvalidResourceURIError, PaperlessConnectionError, ResourceReadError

if TYPE_CHECKING:
    from paperless_mcp.client import PaperlessClient

logger = logging.getLogger(__name__)

URI_PREFIX = "paperless://document/"
RESOURCE_PAGE_SIZE = 50
MIME_TYPE = "text/plain"

_URI_PATTERN = re.compile(rf"^{re.escape(URI_PREFIX)}(\d+)/?$")


def document_uri(document_id: int) -> str:
    return f"{URI_PREFIX}{document_id}"


def parse_document_uri(uri: str) -> int:
    """Extract the document ID from a resource URI.

    Raises:
        InvalidResourceURIError: If the scheme is not supported or the ID is not numeric
    """
    if not uri.startswith(URI_PREFIX):
        raise InvalidResourceURIError(f"Unsupported resource URI: {uri}")

    match = _URI_PATTERN.match(uri)
    if match is None:
        raise InvalidResourceURIError(f"Invalid document ID in URI: {uri}")
    return int(match.group(1))


def _name_of(value: Any) -> str | None:
    """Names of related objects may be nested objects or bare IDs."""
    if isinstance(value, dict):
        return value.get("name")
    if value is None:
        return None
    return str(value)


class DocumentResources:
    """Read-only projection of recent documents as MCP resources."""

    def __init__(self, client: PaperlessClient) -> None:
        self.client = client

    async def list_resources(self) -> list[Resource]:
        """List recent documents.

        Failures yield an empty list so that an unreachable Paperless instance
        does not break client initialization; clients list again later.
        """
        try:
            documents = await self.client.search_documents(limit=RESOURCE_PAGE_SIZE)
        except PaperlessConnectionError as e:
            logger.warning(f"Paperless not reachable, returning empty resources (will retry later): {e}")
            return []
        except Exception as e:
            logger.error(f"Error listing resources: {e}", exc_info=True)
            return []

        return [self._project(doc) for doc in documents.get("results", [])]

    def _project(self, doc: dict[str, Any]) -> Resource:
        correspondent = _name_of(doc.get("correspondent")) or "Unknown"
        document_type = _name_of(doc.get("document_type")) or "No type"
        return Resource(
            uri=AnyUrl(document_uri(doc["id"])),
            name=doc.get("title") or f"Document {doc['id']}",
            description=f"Document from {correspondent} - {document_type}",
            mimeType=MIME_TYPE,
        )

    async def read_resource(self, uri: str) -> TextResourceContents:
        """Read a document resource.

        Raises:
            InvalidResourceURIError: If the URI is malformed (before any API call)
            ResourceReadError: If Paperless-ngx fails to serve the document
        """
        document_id = parse_document_uri(uri)

        try:
            document = await self.client.get_document(document_id)
            content = await self.client.get_document_content(document_id)
        except Exception as e:
            raise ResourceReadError(f"Failed to read document {document_id}: {e}") from e

        return TextResourceContents(uri=AnyUrl(uri), mimeType=MIME_TYPE, text=self.render(document, content))

    @staticmethod
    def render(document: dict[str, Any], content: str) -> str:
        tags = [_name_of(tag) for tag in document.get("tags") or []]
        return (
            f"Title: {document.get('title') or 'Untitled'}\n"
            f"Correspondent: {_name_of(document.get('correspondent')) or 'None'}\n"
            f"Document Type: {_name_of(document.get('document_type')) or 'None'}\n"
            f"Tags: {', '.join(tag for tag in tags if tag) or 'None'}\n"
            f"Created: {document.get('created')}\n"
            f"Modified: {document.get('modified')}\n"
            "\n"
            "Content:\n"
            f"{content}"
        )
