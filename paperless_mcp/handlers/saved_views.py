"""Saved view operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging
from typing import Any

from mcp.types import Tool

from paperless_mcp.handlers.base import EMPTY_SCHEMA, ID_SCHEMA, BaseHandler, drop_unset, to_json

logger = logging.getLogger(__name__)

_VIEW_FIELDS: dict[str, Any] = {
    "show_on_dashboard": {"type": "boolean", "description": "Show on dashboard"},
    "show_in_sidebar": {"type": "boolean", "description": "Show in sidebar"},
    "sort_field": {"type": "string", "description": "Field to sort by"},
    "sort_reverse": {"type": "boolean", "description": "Reverse sort order"},
    "filter_rules": {"type": "array", "description": "Filter rules"},
}


class SavedViewsHandler(BaseHandler):
    """Handler for saved view operations"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for saved view operations."""
        return [
            Tool(
                name="list_saved_views",
                description="List all saved views in Paperless-ngx.",
                inputSchema=EMPTY_SCHEMA,
            ),
            Tool(name="get_saved_view", description="Get details of a specific saved view.", inputSchema=ID_SCHEMA),
            Tool(
                name="create_saved_view",
                description="Create a new saved view.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Name of the saved view"},
                        **_VIEW_FIELDS,
                    },
                    "required": ["name"],
                },
            ),
            Tool(
                name="update_saved_view",
                description="Update an existing saved view.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer", "description": "ID of the saved view to update"},
                        "name": {"type": "string", "description": "Name of the saved view"},
                        **_VIEW_FIELDS,
                    },
                    "required": ["id"],
                },
            ),
            Tool(name="delete_saved_view", description="Delete a saved view.", inputSchema=ID_SCHEMA),
        ]

    async def list_saved_views(self) -> str:
        return to_json(await self.client.list_saved_views())

    async def get_saved_view(self, id: int) -> str:
        return to_json(await self.client.get_saved_view(id))

    async def create_saved_view(
        self,
        name: str,
        show_on_dashboard: bool | None = None,
        show_in_sidebar: bool | None = None,
        sort_field: str | None = None,
        sort_reverse: bool | None = None,
        filter_rules: list[Any] | None = None,
    ) -> str:
        logger.debug(f"Creating saved view: name={name}")
        data = drop_unset(
            name=name,
            show_on_dashboard=show_on_dashboard,
            show_in_sidebar=show_in_sidebar,
            sort_field=sort_field,
            sort_reverse=sort_reverse,
            filter_rules=filter_rules,
        )
        saved_view = await self.client.create_saved_view(data)
        return f"Saved view created: {to_json(saved_view)}"

    async def update_saved_view(
        self,
        id: int,
        name: str | None = None,
        show_on_dashboard: bool | None = None,
        show_in_sidebar: bool | None = None,
        sort_field: str | None = None,
        sort_reverse: bool | None = None,
        filter_rules: list[Any] | None = None,
    ) -> str:
        data = drop_unset(
            name=name,
            show_on_dashboard=show_on_dashboard,
            show_in_sidebar=show_in_sidebar,
            sort_field=sort_field,
            sort_reverse=sort_reverse,
            filter_rules=filter_rules,
        )
        saved_view = await self.client.update_saved_view(id, data)
        return f"Saved view updated: {to_json(saved_view)}"

    async def delete_saved_view(self, id: int) -> str:
        await self.client.delete_saved_view(id)
        return f"Saved view {id} deleted successfully"
