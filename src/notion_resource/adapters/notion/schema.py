"""Pydantic models describing the Notion API payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class NotionBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RichTextPayload(NotionBaseModel):
    plain_text: str = ""


class PropertySchemaPayload(NotionBaseModel):
    id: str | None = None
    name: str | None = None
    type: str


class DatabasePayload(NotionBaseModel):
    object: Literal["database"] = "database"
    id: str
    title: list[RichTextPayload] = Field(default_factory=list)
    last_edited_time: datetime
    properties: dict[str, PropertySchemaPayload] = Field(default_factory=dict)
    url: str | None = None
    archived: bool = False

    @property
    def title_plain_text(self) -> str:
        return "".join(fragment.plain_text for fragment in self.title)


class PagePayload(NotionBaseModel):
    object: Literal["page"] = "page"
    id: str
    created_time: datetime | None = None
    last_edited_time: datetime | None = None
    archived: bool = False
    url: str | None = None
    # kept verbatim so the artifact round-trips through in and out
    properties: dict[str, Any] = Field(default_factory=dict)


class PaginatedPayload(NotionBaseModel):
    has_more: bool = False
    next_cursor: str | None = None


class QueryResponse(PaginatedPayload):
    results: list[PagePayload]


class SearchResponse(PaginatedPayload):
    results: list[dict[str, Any]]


class ErrorResponse(NotionBaseModel):
    object: Literal["error"] = "error"
    status: int
    code: str
    message: str
