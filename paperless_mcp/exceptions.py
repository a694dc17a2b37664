"""Exceptions for Paperless MCP Server."""

from __future__ import annotations


class PaperlessError(Exception):
    """Base exception for Paperless-ngx API errors."""

    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


class PaperlessConnectionError(PaperlessError):
    """Raised when Paperless-ngx cannot be reached or the request times out."""


class PaperlessAuthenticationError(PaperlessError):
    """Raised when the API token is rejected (401/403)."""


class PaperlessNotFoundError(PaperlessError):
    """Raised when a resource is not found (404)."""


class PaperlessValidationError(PaperlessError):
    """Raised when Paperless-ngx rejects the request payload (400/422)."""


class PaperlessServerError(PaperlessError):
    """Raised when Paperless-ngx returns 5xx error."""


class ConfigurationError(Exception):
    """Raised when the server configuration is incomplete or invalid."""


class InvalidResourceURIError(ValueError):
    """Raised when a resource URI does not address a Paperless document."""


class ResourceReadError(Exception):
    """Raised when a resource cannot be read from Paperless-ngx."""


class GatewayError(Exception):
    """Protocol-level error reported as a JSON-RPC error object.

    Subclasses pin the JSON-RPC error code and the HTTP status used by the
    HTTP transports.
    """

    code: int = -32603
    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParseError(GatewayError):
    """Request body is not valid JSON."""

    code = -32700
    http_status = 400


class InvalidRequestError(GatewayError):
    """Request body is valid JSON but not a JSON-RPC request."""

    code = -32600
    http_status = 400


class MethodNotFoundError(GatewayError):
    code = -32601
    http_status = 200


class InvalidParamsError(GatewayError):
    code = -32602
    http_status = 200


class InternalError(GatewayError):
    code = -32603
    http_status = 200


class SessionNotFoundError(GatewayError):
    """Session identifier is missing, unknown or already terminated."""

    code = -32000
    http_status = 400


class ChannelConflictError(GatewayError):
    """A push channel is already open for the session."""

    code = -32000
    http_status = 409
