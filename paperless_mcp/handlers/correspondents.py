"""Correspondent operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging

from mcp.types import Tool

from paperless_mcp.handlers.base import EMPTY_SCHEMA, ID_SCHEMA, BaseHandler, drop_unset, to_json

logger = logging.getLogger(__name__)


class CorrespondentsHandler(BaseHandler):
    """Handler for correspondent-related operations"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for correspondent operations."""
        return [
            Tool(
                name="list_correspondents",
                description="List all correspondents in Paperless-ngx.",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(
                name="get_correspondent",
                description="Get details of a specific correspondent.",
                inputSchema=ID_SCHEMA,
            ),
            Tool(
                name="create_correspondent",
                description="Create a new correspondent in Paperless-ngx.",
                inputSchema={
                    "type": "object",
                    "properties": {"name": {"type": "string", "description": "Name of the new correspondent"}},
                    "required": ["name"],
                },
            ),
            Tool(
                name="update_correspondent",
                description="Update an existing correspondent.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "description": "ID of the correspondent to update"},
                        "name": {"type": "string", "description": "Name of the correspondent"},
                    },
                    "required": ["id"],
                },
            ),
            Tool(name="delete_correspondent", description="Delete a correspondent.", inputSchema=ID_SCHEMA),
        ]

    async def list_correspondents(self) -> str:
        return to_json(await self.client.list_correspondents())

    async def get_correspondent(self, id: int) -> str:
        return to_json(await self.client.get_correspondent(id))

    async def create_correspondent(self, name: str) -> str:
        logger.debug(f"Creating correspondent: name={name}")
        correspondent = await self.client.create_correspondent({"name": name})
        return f"Correspondent created successfully: {to_json(correspondent)}"

    async def update_correspondent(self, id: int, name: str | None = None) -> str:
        correspondent = await self.client.update_correspondent(id, drop_unset(name=name))
        return f"Correspondent updated: {to_json(correspondent)}"

    async def delete_correspondent(self, id: int) -> str:
        await self.client.delete_correspondent(id)
        return f"Correspondent {id} deleted successfully"
