"""Custom field operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging

from mcp.types import Tool

from paperless_mcp.handlers.base import EMPTY_SCHEMA, ID_SCHEMA, BaseHandler, drop_unset, to_json

logger = logging.getLogger(__name__)

DATA_TYPES = ["string", "url", "date", "boolean", "integer", "float", "monetary"]


class CustomFieldsHandler(BaseHandler):
    """Handler for custom field operations"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for custom field operations."""
        return [
            Tool(
                name="list_custom_fields",
                description="List all custom fields in Paperless-ngx.",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(
                name="get_custom_field",
                description="Get details of a specific custom field.",
                inputSchema=ID_SCHEMA,
            ),
            Tool(
                name="create_custom_field",
                description="Create a new custom field.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Name of the custom field"},
                        "data_type": {"type": "string", "enum": DATA_TYPES, "description": "Data type of the field"},
                    },
                    "required": ["name", "data_type"],
                },
            ),
            Tool(
                name="update_custom_field",
                description="Update an existing custom field.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "description": "ID of the custom field to update"},
                        "name": {"type": "string", "description": "Name of the custom field"},
                        "data_type": {"type": "string", "enum": DATA_TYPES, "description": "Data type of the field"},
                    },
                    "required": ["id"],
                },
            ),
            Tool(name="delete_custom_field", description="Delete a custom field.", inputSchema=ID_SCHEMA),
        ]

    async def list_custom_fields(self) -> str:
        return to_json(await self.client.list_custom_fields())

    async def get_custom_field(self, id: int) -> str:
        return to_json(await self.client.get_custom_field(id))

    async def create_custom_field(self, name: str, data_type: str) -> str:
        logger.debug(f"Creating custom field: name={name}, data_type={data_type}")
        custom_field = await self.client.create_custom_field({"name": name, "data_type": data_type})
        return f"Custom field created: {to_json(custom_field)}"

    async def update_custom_field(self, id: int, name: str | None = None, data_type: str | None = None) -> str:
        custom_field = await self.client.update_custom_field(id, drop_unset(name=name, data_type=data_type))
        return f"Custom field updated: {to_json(custom_field)}"

    async def delete_custom_field(self, id: int) -> str:
        await self.client.delete_custom_field(id)
        return f"Custom field {id} deleted successfully"
