"""Task, statistics and log operations handler for Paperless MCP Server"""

from __future__ import annotations

import logging

from mcp.types import Tool

from paperless_mcp.handlers.base import EMPTY_SCHEMA, ID_SCHEMA, BaseHandler, to_json

logger = logging.getLogger(__name__)


class SystemHandler(BaseHandler):
    """Handler for background tasks and system information"""

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for system operations."""
        return [
            Tool(name="list_tasks", description="List all tasks in Paperless-ngx.", inputSchema=EMPTY_SCHEMA),
            Tool(name="acknowledge_task", description="Acknowledge a completed task.", inputSchema=ID_SCHEMA),
            Tool(name="get_statistics", description="Get Paperless-ngx statistics.", inputSchema=EMPTY_SCHEMA),
            Tool(name="get_logs", description="Get Paperless-ngx system logs.", inputSchema=EMPTY_SCHEMA),
        ]

    async def list_tasks(self) -> str:
        return to_json(await self.client.list_tasks())

    async def acknowledge_task(self, id: int) -> str:
        logger.debug(f"Acknowledging task: id={id}")
        await self.client.acknowledge_task(id)
        return f"Task {id} acknowledged successfully"

    async def get_statistics(self) -> str:
        return to_json(await self.client.get_statistics())

    async def get_logs(self) -> str:
        return to_json(await self.client.get_logs())
