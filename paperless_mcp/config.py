"""Runtime configuration from environment variables and command-line flags."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, cast

from paperless_mcp.exceptions import ConfigurationError
from paperless_mcp.gateway.cors import DEFAULT_ALLOWED_ORIGINS

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

type TransportMode = Literal["stdio", "stateless", "duplex", "both"]

TRANSPORT_MODES: tuple[TransportMode, ...] = ("stdio", "stateless", "duplex", "both")
TRANSPORT_ALIASES = {"http": "both", "sse": "duplex"}

DEFAULT_PAPERLESS_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def parse_transport(value: str) -> TransportMode:
    """Normalize a transport name.

    Raises:
        ConfigurationError: If the transport is unknown
    """
    mode = value.strip().lower()
    mode = TRANSPORT_ALIASES.get(mode, mode)
    if mode not in TRANSPORT_MODES:
        raise ConfigurationError(
            f"Invalid transport: {value}. Must be one of: {', '.join(TRANSPORT_MODES + tuple(TRANSPORT_ALIASES))}"
        )
    return cast("TransportMode", mode)


def _split_origins(value: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in value.split(",") if origin.strip())


@dataclass(frozen=True)
class ServerConfig:
    paperless_url: str
    paperless_token: str
    timeout: float = DEFAULT_TIMEOUT
    transport: TransportMode = "stdio"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ALLOWED_ORIGINS)
    log_level: str = "INFO"
    log_file: str | None = None

    @property
    def stateless_enabled(self) -> bool:
        return self.transport in ("stateless", "both")

    @property
    def duplex_enabled(self) -> bool:
        return self.transport in ("duplex", "both")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> ServerConfig:
        """Build the configuration from the environment; non-None overrides win.

        Raises:
            ConfigurationError: If the token is missing or a value is malformed
        """
        env = os.environ if environ is None else environ
        given = {key: value for key, value in overrides.items() if value is not None}

        token = given.get("paperless_token") or env.get("PAPERLESS_TOKEN")
        if not token:
            raise ConfigurationError("PAPERLESS_TOKEN is required (set the environment variable or pass --token)")

        try:
            timeout = float(given.get("timeout") or env.get("PAPERLESS_TIMEOUT", DEFAULT_TIMEOUT))
            port = int(given.get("port") or env.get("MCP_PORT", DEFAULT_PORT))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        origins = env.get("MCP_ALLOWED_ORIGINS")
        return cls(
            paperless_url=str(given.get("paperless_url") or env.get("PAPERLESS_URL", DEFAULT_PAPERLESS_URL)).rstrip(
                "/"
            ),
            paperless_token=str(token),
            timeout=timeout,
            transport=parse_transport(str(given.get("transport") or env.get("MCP_TRANSPORT", "stdio"))),
            host=str(given.get("host") or env.get("MCP_HOST", DEFAULT_HOST)),
            port=port,
            allowed_origins=_split_origins(origins) if origins else DEFAULT_ALLOWED_ORIGINS,
            log_level=str(given.get("log_level") or env.get("PAPERLESS_MCP_LOG_LEVEL", "INFO")),
            log_file=cast("str | None", given.get("log_file") or env.get("PAPERLESS_MCP_LOG_FILE")),
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="paperless-mcp", description="MCP server for Paperless-ngx")
    parser.add_argument("--url", dest="paperless_url", help="Paperless-ngx base URL (env: PAPERLESS_URL)")
    parser.add_argument("--token", dest="paperless_token", help="Paperless-ngx API token (env: PAPERLESS_TOKEN)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds (env: PAPERLESS_TIMEOUT)")
    parser.add_argument(
        "--transport",
        help=(
            "Transport: stdio, stateless, duplex, both or http (env: MCP_TRANSPORT, default: stdio). "
            "both serves the stateless and duplex HTTP endpoints together; stdio is never combined with HTTP"
        ),
    )
    parser.add_argument("--host", help="Host to bind HTTP transports to (env: MCP_HOST, default: 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port for HTTP transports (env: MCP_PORT, default: 3000)")
    parser.add_argument("--log-level", help="Logging level (env: PAPERLESS_MCP_LOG_LEVEL, default: INFO)")
    parser.add_argument("--log-file", help="Optional log file (env: PAPERLESS_MCP_LOG_FILE)")
    return parser


def load_config(argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None) -> ServerConfig:
    args = build_parser().parse_args(argv)
    return ServerConfig.from_env(environ, **vars(args))
