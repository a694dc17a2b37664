"""Document type operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging

from mcp.types import Tool

from paperless_mcp.handlers.base import EMPTY_SCHEMA, ID_SCHEMA, BaseHandler, drop_unset, to_json

logger = logging.getLogger(__name__)


class DocumentTypesHandler(BaseHandler):
    """Handler for document type operations"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for document type operations."""
        return [
            Tool(
                name="list_document_types",
                description="List all document types in Paperless-ngx.",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(
                name="get_document_type",
                description="Get details of a specific document type.",
                inputSchema=ID_SCHEMA,
            ),
            Tool(
                name="create_document_type",
                description="Create a new document type in Paperless-ngx.",
                inputSchema={
                    "type": "object",
                    "properties": {"name": {"type": "string", "description": "Name of the new document type"}},
                    "required": ["name"],
                },
            ),
            Tool(
                name="update_document_type",
                description="Update an existing document type.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "description": "ID of the document type to update"},
                        "name": {"type": "string", "description": "Name of the document type"},
                    },
                    "required": ["id"],
                },
            ),
            Tool(name="delete_document_type", description="Delete a document type.", inputSchema=ID_SCHEMA),
        ]

    async def list_document_types(self) -> str:
        return to_json(await self.client.list_document_types())

    async def get_document_type(self, id: int) -> str:
        return to_json(await self.client.get_document_type(id))

    async def create_document_type(self, name: str) -> str:
        logger.debug(f"Creating document type: name={name}")
        document_type = await self.client.create_document_type({"name": name})
        return f"Document type created successfully: {to_json(document_type)}"

    async def update_document_type(self, id: int, name: str | None = None) -> str:
        document_type = await self.client.update_document_type(id, drop_unset(name=name))
        return f"Document type updated: {to_json(document_type)}"

    async def delete_document_type(self, id: int) -> str:
        await self.client.delete_document_type(id)
        return f"Document type {id} deleted successfully"
