"""Logging setup for the Paperless MCP server.

Log output always goes to stderr: with the stdio transport stdout carries the
protocol stream and must stay clean.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import redis

if TYPE_CHECKING:
    from logging import LogRecord

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
REDIS_LOG_TTL = 7 * 24 * 60 * 60

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys() | {"message", "taskName"}
)

# Libraries that log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


class RedisHandler(logging.Handler):
    """Ships log records to Redis as JSON, one list per day."""

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = "logs",
        additional_fields: dict | None = None,
    ) -> None:
        super().__init__()
        self.client = client
        self.key_prefix = key_prefix
        self.additional_fields = additional_fields or {}

    def to_entry(self, record: LogRecord) -> dict:
        entry = {
            "@timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **self.additional_fields,
        }
        entry.update({key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS})
        if record.exc_info:
            entry["exception"] = self.format(record)
        return entry

    def emit(self, record: LogRecord) -> None:
        if record.name.startswith("redis"):
            return

        try:
            key = f"{self.key_prefix}:{datetime.now(UTC).strftime('%Y-%m-%d')}"
            self.client.rpush(key, json.dumps(self.to_entry(record), default=str))
            self.client.expire(key, REDIS_LOG_TTL)
        except Exception:
            self.handleError(record)


def setup_logging(
    app_name: str = "paperless-mcp",
    log_level: str = "INFO",
    log_file: str | None = None,
    redis_host: str | None = None,
    redis_port: int | None = None,
) -> logging.Logger:
    """Configure stderr, optional file and optional Redis logging.

    Args:
        app_name: Application name attached to Redis log entries
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for a file handler
        redis_host: Redis host (default: from REDIS_HOST env var)
        redis_port: Redis port (default: from REDIS_PORT env var, else 6379)

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    host = redis_host or os.getenv("REDIS_HOST")
    port = redis_port or int(os.getenv("REDIS_PORT", "6379"))

    if host:
        try:
            client = redis.Redis(host=host, port=port, socket_timeout=2, decode_responses=True)
            client.ping()
            handler = RedisHandler(
                client,
                additional_fields={"application": app_name, "environment": os.getenv("ENVIRONMENT", "develop")},
            )
            handler.setLevel(logging.INFO)
            root_logger.addHandler(handler)
            root_logger.info(f"Redis logging enabled: {host}:{port}")
        except Exception as e:
            root_logger.warning(f"Redis logging disabled: {e}")

    return root_logger
