"""Tool catalog: static registration table and dispatch boundary.

Every tool call ends here. Argument validation failures and upstream errors
are converted into ``isError`` tool results so that nothing raised by a
handler reaches the protocol layer.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import jsonschema
from mcp.types import CallToolResult, TextContent

from paperless_mcp.handlers import HANDLER_CLASSES

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from mcp.types import Tool

    from paperless_mcp.client import PaperlessClient
    from paperless_mcp.handlers.base import BaseHandler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolEntry:
    """One row of the catalog: the advertised tool and the coroutine serving it."""

    tool: Tool
    handler: Callable[..., Awaitable[str]]

    @property
    def accepted_arguments(self) -> set[str]:
        return set(self.tool.inputSchema.get("properties", {}))


class ToolCatalog:
    """Mapping from tool name to its schema and handler method, built once."""

    def __init__(self, handlers: Iterable[BaseHandler]) -> None:
        self.handlers = list(handlers)
        self._entries = self._build_tool_registry()

    @classmethod
    def from_client(cls, client: PaperlessClient) -> ToolCatalog:
        return cls(handler_class(client) for handler_class in HANDLER_CLASSES)

    def _build_tool_registry(self) -> dict[str, ToolEntry]:
        """Collect tools from all handlers.

        Raises:
            ValueError: If duplicate tool names are found or invalid tool mappings exist
        """
        registry: dict[str, ToolEntry] = {}

        for handler in self.handlers:
            tools = {tool.name: tool for tool in handler.get_tool_definitions()}

            for tool_name, method_name in handler.get_tool_registry().items():
                if tool_name in registry:
                    logger.error(f"Duplicate tool name '{tool_name}' in {handler.__class__.__name__}")
                    raise ValueError(f"Duplicate tool name: {tool_name}")

                method = getattr(handler, method_name, None)
                if method is None:
                    logger.error(
                        f"{handler.__class__.__name__} maps tool '{tool_name}' to missing method '{method_name}'"
                    )
                    raise ValueError(f"Invalid tool mapping: {tool_name} -> {method_name}")

                if not inspect.iscoroutinefunction(method):
                    logger.error(
                        f"{handler.__class__.__name__} maps tool '{tool_name}' to non-async method '{method_name}'"
                    )
                    raise ValueError(f"Tool method must be async: {tool_name} -> {method_name}")

                registry[tool_name] = ToolEntry(tool=tools[tool_name], handler=method)

        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def tool_names(self) -> list[str]:
        return list(self._entries)

    def list_tools(self) -> list[Tool]:
        return [entry.tool for entry in self._entries.values()]

    def get(self, name: str) -> ToolEntry | None:
        return self._entries.get(name)

    async def call(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Validate arguments, invoke the tool and wrap its text.

        Unknown tools, invalid arguments and handler exceptions all come back
        as a result flagged with ``isError``.
        """
        arguments = arguments or {}
        logger.info(f"Tool called: {name} with arguments: {arguments}")

        try:
            entry = self._entries.get(name)
            if entry is None:
                raise ValueError(f"Unknown tool: {name}")

            try:
                jsonschema.validate(instance=arguments, schema=entry.tool.inputSchema)
            except jsonschema.ValidationError as e:
                path = ".".join(str(part) for part in e.absolute_path)
                location = f" (at '{path}')" if path else ""
                raise ValueError(f"Invalid arguments: {e.message}{location}") from e

            kwargs = {key: value for key, value in arguments.items() if key in entry.accepted_arguments}
            text = await entry.handler(**kwargs)
        except Exception as e:
            logger.error(f"Tool {name} failed: {e!s}", exc_info=not isinstance(e, ValueError))
            return _error_result(f"Error executing tool {name}: {e}")

        logger.info(f"Tool {name} completed successfully")
        return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


def _error_result(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)
