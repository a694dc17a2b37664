"""Tag operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging

from mcp.types import Tool

from paperless_mcp.handlers.base import EMPTY_SCHEMA, ID_SCHEMA, BaseHandler, drop_unset, to_json

logger = logging.getLogger(__name__)


class TagsHandler(BaseHandler):
    """Handler for tag-related operations"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for tag operations."""
        return [
            Tool(
                name="list_tags",
                description="List all available tags in Paperless-ngx.",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(name="get_tag", description="Get details of a specific tag.", inputSchema=ID_SCHEMA),
            Tool(
                name="create_tag",
                description="Create a new tag in Paperless-ngx.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Name of the new tag"},
                        "color": {"type": "string", "description": "Color code for the tag (hex format)"},
                        "text_color": {"type": "string", "description": "Text color for the tag (hex format)"},
                    },
                    "required": ["name"],
                },
            ),
            Tool(
                name="update_tag",
                description="Update an existing tag.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "description": "ID of the tag to update"},
                        "name": {"type": "string", "description": "Name of the tag"},
                        "color": {"type": "string", "description": "Color code for the tag (hex format)"},
                        "text_color": {"type": "string", "description": "Text color for the tag (hex format)"},
                    },
                    "required": ["id"],
                },
            ),
            Tool(name="delete_tag", description="Delete a tag.", inputSchema=ID_SCHEMA),
        ]

    async def list_tags(self) -> str:
        return to_json(await self.client.list_tags())

    async def get_tag(self, id: int) -> str:
        return to_json(await self.client.get_tag(id))

    async def create_tag(self, name: str, color: str | None = None, text_color: str | None = None) -> str:
        logger.debug(f"Creating tag: name={name}")
        tag = await self.client.create_tag(drop_unset(name=name, color=color, text_color=text_color))
        return f"Tag created successfully: {to_json(tag)}"

    async def update_tag(
        self, id: int, name: str | None = None, color: str | None = None, text_color: str | None = None
    ) -> str:
        logger.debug(f"Updating tag: id={id}")
        tag = await self.client.update_tag(id, drop_unset(name=name, color=color, text_color=text_color))
        return f"Tag updated: {to_json(tag)}"

    async def delete_tag(self, id: int) -> str:
        logger.debug(f"Deleting tag: id={id}")
        await self.client.delete_tag(id)
        return f"Tag {id} deleted successfully"
