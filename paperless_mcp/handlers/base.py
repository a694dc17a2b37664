"""Base handler class for Paperless MCP Server handlers"""

from __future__ import annotations

import inspect
import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mcp.types import Tool

    from paperless_mcp.client import PaperlessClient

logger = logging.getLogger(__name__)

ID_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"id": {"type": "integer", "description": "ID of the resource"}},
    "required": ["id"],
}

EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


def to_json(data: Any) -> str:
    """Serialize an API payload the way every tool reports it."""
    return json.dumps(data, indent=2, ensure_ascii=False)


def drop_unset(**fields: Any) -> dict[str, Any]:
    """Keep only the fields the caller actually provided."""
    return {key: value for key, value in fields.items() if value is not None}


class BaseHandler:
    """Base handler class providing shared functionality for all handlers"""

    def __init__(self, client: PaperlessClient) -> None:
        """Initialize the base handler.

        Args:
            client: Shared PaperlessClient instance
        """
        self.client = client
        self._validate_tool_definitions()

    @classmethod
    def get_tool_definitions(cls) -> list[Tool]:
        """Get list of tool definitions for this handler.

        This method should be overridden by subclasses to return their tool definitions.

        Returns:
            List of Tool objects with their schemas and descriptions
        """
        return []

    def _validate_tool_definitions(self) -> None:
        """Warn when public methods and tool definitions drift apart."""
        public_methods = {
            name
            for name, method in inspect.getmembers(self.__class__, predicate=inspect.iscoroutinefunction)
            if not name.startswith("_")
        }
        tool_names = {tool.name for tool in self.get_tool_definitions()}

        missing_tools = public_methods - tool_names
        if missing_tools:
            logger.warning(
                f"{self.__class__.__name__}: Public methods without tool definitions: {', '.join(sorted(missing_tools))}"
            )

        missing_methods = tool_names - public_methods
        if missing_methods:
            logger.warning(
                f"{self.__class__.__name__}: Tool definitions without corresponding methods: {', '.join(sorted(missing_methods))}"
            )

    @classmethod
    def get_tool_registry(cls) -> dict[str, str]:
        """Get mapping of tool names to method names.

        By default, tool names map directly to method names.
        Override this if your tool names differ from method names.

        Returns:
            Dictionary mapping tool names to method names
        """
        return {tool.name: tool.name for tool in cls.get_tool_definitions()}
