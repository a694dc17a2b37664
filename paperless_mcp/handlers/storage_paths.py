"""Storage path operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging

from mcp.types import Tool

from paperless_mcp.handlers.base import EMPTY_SCHEMA, ID_SCHEMA, BaseHandler, drop_unset, to_json

logger = logging.getLogger(__name__)


class StoragePathsHandler(BaseHandler):
    """Handler for storage path operations"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for storage path operations."""
        return [
            Tool(
                name="list_storage_paths",
                description="List all storage paths in Paperless-ngx.",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(
                name="get_storage_path",
                description="Get details of a specific storage path.",
                inputSchema=ID_SCHEMA,
            ),
            Tool(
                name="create_storage_path",
                description="Create a new storage path.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Name of the storage path"},
                        "path": {"type": "string", "description": "File system path"},
                        "match": {"type": "string", "description": "Matching pattern"},
                        "matching_algorithm": {"type": "integer", "description": "Algorithm for matching"},
                    },
                    "required": ["name", "path"],
                },
            ),
            Tool(
                name="update_storage_path",
                description="Update an existing storage path.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "description": "ID of the storage path to update"},
                        "name": {"type": "string", "description": "Name of the storage path"},
                        "path": {"type": "string", "description": "File system path"},
                        "match": {"type": "string", "description": "Matching pattern"},
                        "matching_algorithm": {"type": "integer", "description": "Algorithm for matching"},
                    },
                    "required": ["id"],
                },
            ),
            Tool(name="delete_storage_path", description="Delete a storage path.", inputSchema=ID_SCHEMA),
        ]

    async def list_storage_paths(self) -> str:
        return to_json(await self.client.list_storage_paths())

    async def get_storage_path(self, id: int) -> str:
        return to_json(await self.client.get_storage_path(id))

    async def create_storage_path(
        self, name: str, path: str, match: str | None = None, matching_algorithm: int | None = None
    ) -> str:
        logger.debug(f"Creating storage path: name={name}, path={path}")
        data = drop_unset(name=name, path=path, match=match, matching_algorithm=matching_algorithm)
        storage_path = await self.client.create_storage_path(data)
        return f"Storage path created: {to_json(storage_path)}"

    async def update_storage_path(
        self,
        id: int,
        name: str | None = None,
        path: str | None = None,
        match: str | None = None,
        matching_algorithm: int | None = None,
    ) -> str:
        data = drop_unset(name=name, path=path, match=match, matching_algorithm=matching_algorithm)
        storage_path = await self.client.update_storage_path(id, data)
        return f"Storage path updated: {to_json(storage_path)}"

    async def delete_storage_path(self, id: int) -> str:
        await self.client.delete_storage_path(id)
        return f"Storage path {id} deleted successfully"
