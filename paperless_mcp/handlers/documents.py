"""Document operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import Tool

from paperless_mcp.handlers.base import BaseHandler, drop_unset, to_json

logger = logging.getLogger(__name__)

ORDERING_CHOICES = ["created", "-created", "modified", "-modified", "title", "-title"]

DOCUMENT_ID_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"document_id": {"type": "integer", "description": "ID of the document"}},
    "required": ["document_id"],
}

_DOCUMENT_FIELDS: dict[str, Any] = {
    "title": {"type": "string", "description": "New document title"},
    "correspondent": {"type": "integer", "description": "Correspondent ID"},
    "document_type": {"type": "integer", "description": "Document type ID"},
    "tags": {"type": "array", "items": {"type": "integer"}, "description": "Array of tag IDs to assign"},
    "archive_serial_number": {"type": "string", "description": "Archive serial number"},
}


class DocumentsHandler(BaseHandler):
    """Handler for document-related operations"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for document operations."""
        return [
            Tool(
                name="search_documents",
                description="Search for documents in Paperless-ngx with optional filters. "
                "Returns: count, next, previous, results.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {"type": "string", "description": "Search query for documents"},
                        "limit": {
                            "type": "integer",
                            "default": 10,
                            "description": "Maximum number of results to return",
                        },
                        "ordering": {
                            "type": "string",
                            "enum": ORDERING_CHOICES,
                            "description": "Sort order for results",
                        },
                        "document_type": {"type": "integer", "description": "Filter by document type ID"},
                        "correspondent": {"type": "integer", "description": "Filter by correspondent ID"},
                        "tags": {
                            "type": "array",
                            "items": {"type": "integer"},
                            "description": "Filter by tag IDs",
                        },
                    },
                },
            ),
            Tool(
                name="get_document",
                description="Retrieve detailed information about a specific document.",
                inputSchema=DOCUMENT_ID_SCHEMA,
            ),
            Tool(
                name="update_document",
                description="Update document metadata (title, tags, correspondent, etc.).",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "document_id": {"type": "integer", "description": "ID of the document to update"},
                        **_DOCUMENT_FIELDS,
                    },
                    "required": ["document_id"],
                },
            ),
            Tool(
                name="delete_document",
                description="Delete a document from Paperless-ngx.",
                inputSchema=DOCUMENT_ID_SCHEMA,
            ),
            Tool(
                name="get_document_suggestions",
                description="Get automatic suggestions for document metadata.",
                inputSchema=DOCUMENT_ID_SCHEMA,
            ),
            Tool(
                name="get_document_metadata",
                description="Get extracted metadata from document.",
                inputSchema=DOCUMENT_ID_SCHEMA,
            ),
            Tool(
                name="download_document",
                description="Get download URL for a document's original file.",
                inputSchema=DOCUMENT_ID_SCHEMA,
            ),
            Tool(
                name="bulk_update_documents",
                description="Update multiple documents at once with new metadata (requires document IDs). "
                "Returns: number of updated documents and failure details.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "documents": {
                            "type": "array",
                            "description": "Array of documents to update with their IDs and new values",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "id": {"type": "integer", "description": "Document ID to update"},
                                    **_DOCUMENT_FIELDS,
                                },
                                "required": ["id"],
                            },
                        },
                    },
                    "required": ["documents"],
                },
            ),
        ]

    async def search_documents(
        self,
        query: str | None = None,
        limit: int = 10,
        ordering: str | None = None,
        document_type: int | None = None,
        correspondent: int | None = None,
        tags: list[int] | None = None,
    ) -> str:
        """Search documents and return the raw search response."""
        logger.debug(f"Searching documents: query={query}, limit={limit}, ordering={ordering}")
        results = await self.client.search_documents(
            query=query,
            limit=limit,
            ordering=ordering,
            document_type=document_type,
            correspondent=correspondent,
            tags=tags,
        )
        return to_json(results)

    async def get_document(self, document_id: int) -> str:
        logger.debug(f"Retrieving document: document_id={document_id}")
        return to_json(await self.client.get_document(document_id))

    async def update_document(
        self,
        document_id: int,
        title: str | None = None,
        correspondent: int | None = None,
        document_type: int | None = None,
        tags: list[int] | None = None,
        archive_serial_number: str | None = None,
    ) -> str:
        """Patch only the provided fields of a document."""
        updates = drop_unset(
            title=title,
            correspondent=correspondent,
            document_type=document_type,
            tags=tags,
            archive_serial_number=archive_serial_number,
        )
        logger.debug(f"Updating document: document_id={document_id}, fields={sorted(updates)}")
        updated = await self.client.update_document(document_id, updates)
        return f"Document {document_id} updated successfully: {to_json(updated)}"

    async def delete_document(self, document_id: int) -> str:
        logger.debug(f"Deleting document: document_id={document_id}")
        await self.client.delete_document(document_id)
        return f"Document {document_id} deleted successfully"

    async def get_document_suggestions(self, document_id: int) -> str:
        return to_json(await self.client.get_document_suggestions(document_id))

    async def get_document_metadata(self, document_id: int) -> str:
        return to_json(await self.client.get_document_metadata(document_id))

    async def download_document(self, document_id: int) -> str:
        return f"Download URL: {self.client.get_download_url(document_id)}"

    async def bulk_update_documents(self, documents: list[dict[str, Any]]) -> str:
        """Update several documents and summarize per-item outcomes.

        Partial failure is reported in the text, never raised.
        """
        logger.debug(f"Bulk updating {len(documents)} documents")
        items = [
            {key: value for key, value in doc.items() if key == "id" or key in _DOCUMENT_FIELDS} for doc in documents
        ]
        result = await self.client.bulk_update_documents(items)
        failed = result["failed_updates"]

        lines = [
            "Bulk update completed:",
            f"✅ Successfully updated: {result['updated_count']} documents",
        ]
        if failed:
            lines.append(f"❌ Failed updates: {len(failed)}")
            lines.append("")
            lines.append("Failure details:")
            lines.extend(f"- Document ID {failure['id']}: {failure['error']}" for failure in failed)
        return "\n".join(lines) + "\n"
