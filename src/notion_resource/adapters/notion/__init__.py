"""Public interface for the Notion adapter."""

from __future__ import annotations

from .client import NotionClient
from .schema import DatabasePayload, ErrorResponse, PagePayload, QueryResponse, SearchResponse
from .translator import build_query_filter, typed_properties, writable_properties

__all__ = [
    "DatabasePayload",
    "ErrorResponse",
    "NotionClient",
    "PagePayload",
    "QueryResponse",
    "SearchResponse",
    "build_query_filter",
    "typed_properties",
    "writable_properties",
]
