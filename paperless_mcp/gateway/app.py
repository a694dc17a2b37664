"""FastAPI application serving the HTTP transports."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from paperless_mcp.gateway import duplex, stateless
from paperless_mcp.gateway.cors import DEFAULT_ALLOWED_ORIGINS, OriginAwareCORSMiddleware
from paperless_mcp.gateway.protocol import SERVER_NAME

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterable

    from paperless_mcp.gateway.dependencies import Gateway

logger = logging.getLogger(__name__)


def create_app(
    gateway: Gateway,
    *,
    stateless_enabled: bool = True,
    duplex_enabled: bool = True,
    allowed_origins: Iterable[str] = DEFAULT_ALLOWED_ORIGINS,
    version: str = "0.0.0",
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    """Build the gateway application.

    Args:
        gateway: Shared session registry and protocol handler
        stateless_enabled: Mount the stateless ``/api`` endpoint
        duplex_enabled: Mount the duplex ``/mcp`` and ``/message`` endpoints
        allowed_origins: Origins echoed back in CORS headers
        version: Version reported in the OpenAPI document
        on_shutdown: Coroutine run after all sessions are closed on shutdown
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"Paperless MCP gateway starting (stateless={stateless_enabled}, duplex={duplex_enabled})")
        yield
        logger.info(f"Paperless MCP gateway shutting down, closing {len(gateway.registry)} session(s)")
        gateway.registry.close_all()
        if on_shutdown is not None:
            await on_shutdown()

    app = FastAPI(
        title="Paperless MCP Gateway",
        description="Model Context Protocol gateway for Paperless-ngx",
        version=version,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.gateway = gateway
    app.add_middleware(OriginAwareCORSMiddleware, allowed_origins=allowed_origins)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "server": SERVER_NAME}

    if stateless_enabled:
        app.include_router(stateless.router)
    if duplex_enabled:
        app.include_router(duplex.router)

    return app
