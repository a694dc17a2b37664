"""Stateless HTTP transport.

Every JSON-RPC request is answered on its own HTTP response. The session
identifier is minted on ``initialize`` and travels in the ``Mcp-Session-Id``
header afterwards. ``GET`` opens an optional push stream for the session and
``DELETE`` ends it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from paperless_mcp.exceptions import ChannelConflictError, GatewayError, InternalError, SessionNotFoundError
from paperless_mcp.gateway.dependencies import PROTOCOL_VERSION_HEADER, SESSION_HEADER, Gateway, get_gateway
from paperless_mcp.gateway.protocol import PROTOCOL_VERSION, decode_message, error_response, gateway_error_response
from paperless_mcp.gateway.sessions import EventChannel

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from paperless_mcp.gateway.sessions import SessionRegistry

logger = logging.getLogger(__name__)

STATELESS_PATH = "/api"

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive", "X-Accel-Buffering": "no"}

router = APIRouter(tags=["mcp"])


def _error(request_id: object, error: GatewayError) -> JSONResponse:
    return JSONResponse(gateway_error_response(request_id, error), status_code=error.http_status)


async def stream_channel(registry: SessionRegistry, session_id: str, channel: EventChannel) -> AsyncIterator[str]:
    """Relay frames of a push channel until it closes or the client goes away."""
    try:
        async for frame in channel.frames():
            yield frame
    finally:
        registry.detach_channel(session_id, channel)
        logger.info(f"Push stream closed for session {session_id}")


@router.post(STATELESS_PATH)
async def post_message(request: Request, gateway: Annotated[Gateway, Depends(get_gateway)]) -> Response:
    """Handle one JSON-RPC request and answer it on this response."""
    body = await request.body()
    try:
        message = decode_message(body)
    except GatewayError as e:
        logger.warning(f"Rejected request body: {e.message}")
        return _error(None, e)

    request_id = message.get("id")

    if message["method"] == "initialize":
        response = await gateway.protocol.handle(message)
        if response is None:
            return Response(status_code=202)
        if "result" not in response:
            return JSONResponse(response)

        session = gateway.registry.create("stateless")
        headers = {
            SESSION_HEADER: session.session_id,
            PROTOCOL_VERSION_HEADER: request.headers.get(PROTOCOL_VERSION_HEADER, PROTOCOL_VERSION),
        }
        return JSONResponse(response, headers=headers)

    try:
        session = gateway.registry.require(request.headers.get(SESSION_HEADER), "stateless")

    except SessionNotFoundError as e:
        return _error(request_id, e)

    try:
        response = await gateway.protocol.handle(message)
    except Exception as e:
        logger.error(f"Error processing request for session {session.session_id}: {e}", exc_info=True)
        return JSONResponse(error_response(request_id, InternalError.code, "Internal error"), status_code=500)

    if response is None:
        return Response(status_code=202)
    return JSONResponse(response)


@router.get(STATELESS_PATH)
async def open_stream(request: Request, gateway: Annotated[Gateway, Depends(get_gateway)]) -> Response:
    """Open the server-to-client push stream of an existing session."""
    channel = EventChannel()
    try:
        session = gateway.registry.attach_channel(request.headers.get(SESSION_HEADER), channel)
    except SessionNotFoundError:
        return PlainTextResponse("GET requires valid Mcp-Session-Id header", status_code=400)
    except ChannelConflictError as e:
        return PlainTextResponse(e.message, status_code=409)

    logger.info(f"Push stream opened for session {session.session_id}")
    return StreamingResponse(
        stream_channel(gateway.registry, session.session_id, channel),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.delete(STATELESS_PATH)
async def delete_session(request: Request, gateway: Annotated[Gateway, Depends(get_gateway)]) -> Response:
    """Terminate a session; its identifier is never accepted again."""
    try:
        gateway.registry.terminate(request.headers.get(SESSION_HEADER), "stateless")
    except SessionNotFoundError:
        return PlainTextResponse("Session not found", status_code=404)
    return JSONResponse({"success": True})
