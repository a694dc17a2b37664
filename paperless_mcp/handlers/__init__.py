"""Handler modules for Paperless MCP Server"""

from __future__ import annotations

from paperless_mcp.handlers.correspondents import CorrespondentsHandler
from paperless_mcp.handlers.custom_fields import CustomFieldsHandler
from paperless_mcp.handlers.document_types import DocumentTypesHandler
from paperless_mcp.handlers.documents import DocumentsHandler
from paperless_mcp.handlers.saved_views import SavedViewsHandler
from paperless_mcp.handlers.storage_paths import StoragePathsHandler
from paperless_mcp.handlers.system import SystemHandler
from paperless_mcp.handlers.tags import TagsHandler

HANDLER_CLASSES = (
    DocumentsHandler,
    TagsHandler,
    CorrespondentsHandler,
    DocumentTypesHandler,
    StoragePathsHandler,
    CustomFieldsHandler,
    SavedViewsHandler,
    SystemHandler,
)

__all__ = [
    "HANDLER_CLASSES",
    "CorrespondentsHandler",
    "CustomFieldsHandler",
    "DocumentTypesHandler",
    "DocumentsHandler",
    "SavedViewsHandler",
    "StoragePathsHandler",
    "SystemHandler",
    "TagsHandler",
]
