"""MCP server for Paperless-ngx."""

from __future__ import annotations

__version__ = "1.1.2"
