"""JSON-RPC envelope handling shared by the HTTP transports."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from mcp.types import (
    CallToolRequestParams,
    Implementation,
    InitializeResult,
    ListResourcesResult,
    ListToolsResult,
    ReadResourceRequestParams,
    ReadResourceResult,
    ResourcesCapability,
    ServerCapabilities,
    ToolsCapability,
)
from pydantic import BaseModel, ValidationError

from paperless_mcp.exceptions import (
    GatewayError,
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    InvalidResourceURIError,
    MethodNotFoundError,
    ParseError,
    ResourceReadError,
)

if TYPE_CHECKING:
    from paperless_mcp.catalog import ToolCatalog
    from paperless_mcp.resources import DocumentResources

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "paperless-mcp"


def decode_message(body: bytes | str) -> dict[str, Any]:
    """Parse a request body into a JSON-RPC message.

    Raises:
        ParseError: If the body is not JSON
        InvalidRequestError: If the JSON is not a JSON-RPC request or notification
    """
    try:
        message = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Parse error: {e}") from e

    if not isinstance(message, dict):
        raise InvalidRequestError("Invalid Request: expected a JSON object")
    if message.get("jsonrpc", JSONRPC_VERSION) != JSONRPC_VERSION:
        raise InvalidRequestError(f"Invalid Request: unsupported jsonrpc version {message.get('jsonrpc')!r}")
    if not isinstance(message.get("method"), str):
        raise InvalidRequestError("Invalid Request: missing method")
    return message


def is_notification(message: dict[str, Any]) -> bool:
    return "id" not in message


def result_response(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": {"code": code, "message": message}}


def gateway_error_response(request_id: Any, error: GatewayError) -> dict[str, Any]:
    return error_response(request_id, error.code, error.message)


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProtocolHandler:
    """Dispatches decoded JSON-RPC requests to the tool catalog and resources."""

    def __init__(self, catalog: ToolCatalog, resources: DocumentResources, server_version: str) -> None:
        self.catalog = catalog
        self.resources = resources
        self.server_version = server_version
        self._methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
        }

    def initialize_result(self) -> dict[str, Any]:
        return _dump(
            InitializeResult(
                protocolVersion=PROTOCOL_VERSION,
                capabilities=ServerCapabilities(tools=ToolsCapability(), resources=ResourcesCapability()),
                serverInfo=Implementation(name=SERVER_NAME, version=self.server_version),
            )
        )

    async def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Handle one request; returns the response envelope, or None for notifications."""
        method = message["method"]
        request_id = message.get("id")
        params = message.get("params") or {}

        if is_notification(message):
            logger.debug(f"Notification received: {method}")
            return None

        logger.info(f"MCP {method} (id: {request_id})")
        try:
            handler = self._methods.get(method)
            if handler is None:
                raise MethodNotFoundError(f"Method not found: {method}")
            if not isinstance(params, dict):
                raise InvalidParamsError("Invalid params: expected an object")
            result = await handler(params)
        except GatewayError as e:
            logger.warning(f"MCP {method} rejected: {e.message}")
            return gateway_error_response(request_id, e)
        except Exception as e:
            logger.error(f"Error handling MCP {method}: {e}", exc_info=True)
            return error_response(request_id, InternalError.code, str(e) or "Internal error")

        return result_response(request_id, result)

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        client_info = params.get("clientInfo") or {}
        logger.info(f"Initialize from client: {client_info.get('name', 'unknown')} {client_info.get('version', '')}")
        return self.initialize_result()

    async def _ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _list_tools(self, params: dict[str, Any]) -> dict[str, Any]:
        return _dump(ListToolsResult(tools=self.catalog.list_tools()))

    async def _call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            call = CallToolRequestParams.model_validate(params)
        except ValidationError as e:
            raise InvalidParamsError(f"Invalid params for tools/call: {e.errors()[0]['msg']}") from e

        result = await self.catalog.call(call.name, call.arguments)
        return _dump(result)

    async def _list_resources(self, params: dict[str, Any]) -> dict[str, Any]:
        return _dump(ListResourcesResult(resources=await self.resources.list_resources()))

    async def _read_resource(self, params: dict[str, Any]) -> dict[str, Any]:
        try:
            read = ReadResourceRequestParams.model_validate(params)
        except ValidationError as e:
            raise InvalidParamsError(f"Invalid params for resources/read: {e.errors()[0]['msg']}") from e

        try:
            contents = await self.resources.read_resource(str(read.uri))
        except (InvalidResourceURIError, ResourceReadError) as e:
            raise InternalError(str(e)) from e
        return _dump(ReadResourceResult(contents=[contents]))
