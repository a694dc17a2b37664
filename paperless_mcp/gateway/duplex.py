"""Duplex server-sent-events transport.

A client opens a long-lived ``GET`` stream; its first frame is an ``endpoint``
event naming the URL for follow-up ``POST`` requests. Follow-ups are
acknowledged with ``202 Accepted`` and their responses are written onto the
stream as ``message`` events.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from paperless_mcp.exceptions import GatewayError, SessionNotFoundError
from paperless_mcp.gateway.dependencies import Gateway, get_gateway
from paperless_mcp.gateway.protocol import decode_message
from paperless_mcp.gateway.sessions import EventChannel
from paperless_mcp.gateway.stateless import SSE_HEADERS

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from paperless_mcp.gateway.protocol import ProtocolHandler
    from paperless_mcp.gateway.sessions import Session, SessionRegistry

logger = logging.getLogger(__name__)

DUPLEX_PATHS = ("/mcp", "/message")

router = APIRouter(tags=["mcp"])


def open_duplex_session(registry: SessionRegistry, path: str) -> Session:
    """Register a duplex session and queue its ``endpoint`` frame."""
    channel = EventChannel()
    session = registry.create("duplex", channel)
    channel.send(f"{path}?sessionId={session.session_id}", event="endpoint")
    return session


async def stream_session(registry: SessionRegistry, session: Session) -> AsyncIterator[str]:
    """Relay the session's frames; the session ends with its stream."""
    channel = session.channel
    try:
        if channel is not None:
            async for frame in channel.frames():
                yield frame
    finally:
        if session.session_id in registry:
            registry.terminate(session.session_id)
        logger.info(f"SSE connection closed: {session.session_id}")


async def deliver(protocol: ProtocolHandler, session: Session, message: dict[str, Any]) -> None:
    """Process a follow-up request and push its response onto the session stream.

    Responses for sessions closed in the meantime are dropped.
    """
    channel = session.channel
    response = await protocol.handle(message)
    if response is None:
        return
    if channel is None or not channel.send(json.dumps(response)):
        logger.info(f"Discarding response for closed session {session.session_id}")


def _session_id_from(request: Request) -> str | None:
    return request.query_params.get("sessionId") or request.query_params.get("session")


async def _open(request: Request, gateway: Annotated[Gateway, Depends(get_gateway)]) -> Response:
    session = open_duplex_session(gateway.registry, request.url.path)
    logger.info(f"SSE connection opened: {session.session_id}")
    return StreamingResponse(
        stream_session(gateway.registry, session), media_type="text/event-stream", headers=SSE_HEADERS
    )


async def _post(
    request: Request, gateway: Annotated[Gateway, Depends(get_gateway)], background_tasks: BackgroundTasks
) -> Response:
    try:
        session = gateway.registry.require(_session_id_from(request), "duplex")
    except SessionNotFoundError:
        return PlainTextResponse("Session not found", status_code=404)

    body = await request.body()
    try:
        message = decode_message(body)
    except GatewayError as e:
        logger.warning(f"Rejected message for session {session.session_id}: {e.message}")
        return PlainTextResponse("Invalid JSON", status_code=400)

    background_tasks.add_task(deliver, gateway.protocol, session, message)
    return PlainTextResponse("Accepted", status_code=202)


for _path in DUPLEX_PATHS:
    router.add_api_route(_path, _open, methods=["GET"])
    router.add_api_route(_path, _post, methods=["POST"])
