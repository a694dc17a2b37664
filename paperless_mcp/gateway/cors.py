"""Origin-aware CORS middleware.

Every request is served regardless of its origin. The allow-list only decides
whether the caller's origin is echoed back or the wildcard is granted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response

if TYPE_CHECKING:
    from collections.abc import Iterable

    from starlette.types import ASGIApp, Message, Receive, Scope, Send

DEFAULT_ALLOWED_ORIGINS = ("https://chatgpt.com", "https://chat.openai.com")

ALLOW_METHODS = "GET, POST, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, Mcp-Session-Id, MCP-Protocol-Version"
EXPOSE_HEADERS = "Mcp-Session-Id, MCP-Protocol-Version"
PREFLIGHT_MAX_AGE = "86400"


def allow_origin_for(origin: str | None, allowed_origins: Iterable[str]) -> str:
    if origin and origin in allowed_origins:
        return origin
    return "*"


class OriginAwareCORSMiddleware:
    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str] = DEFAULT_ALLOWED_ORIGINS) -> None:
        self.app = app
        self.allowed_origins = frozenset(allowed_origins)

    def _cors_headers(self, origin: str | None) -> dict[str, str]:
        allow_origin = allow_origin_for(origin, self.allowed_origins)
        headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Expose-Headers": EXPOSE_HEADERS,
        }
        if allow_origin != "*":
            headers["Access-Control-Allow-Credentials"] = "true"
            headers["Vary"] = "Origin"
        return headers

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_headers = Headers(scope=scope)
        cors_headers = self._cors_headers(request_headers.get("origin"))

        if scope["method"] == "OPTIONS":
            response = Response(
                status_code=204, headers={**cors_headers, "Access-Control-Max-Age": PREFLIGHT_MAX_AGE}
            )
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for key, value in cors_headers.items():
                    headers[key] = value
            await send(message)

        await self.app(scope, receive, send_with_cors)
