"""Pydantic models for the orchestrator's stdin and stdout payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from notion_resource.config.notion import NotionConfig, get_notion_config
from notion_resource.domain.reconciliation import Append, Mode, Replace, Update
from notion_resource.domain.types import Version, parse_collection_id


class ProtocolModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def parse_mode(value: object) -> Mode:
    """Parse ``"append"``, ``"replace"`` or ``{"update": {"primary_id_property": ...}}``."""

    if isinstance(value, Append | Replace | Update):
        return value
    if value is None:
        return Append()
    if isinstance(value, str):
        name = value.strip().lower()
        if name == Append.name:
            return Append()
        if name == Replace.name:
            return Replace()
        if name == Update.name:
            raise ValueError("update mode requires a primary_id_property")
        raise ValueError(f"Unknown mode: {value!r}")
    if isinstance(value, Mapping) and len(value) == 1:
        ((tag, body),) = value.items()
        if not isinstance(tag, str):
            raise ValueError(f"Unknown mode: {value!r}")
        if tag.lower() != Update.name:
            if body is None or body == {}:
                return parse_mode(tag)
            raise ValueError(f"Mode {tag!r} takes no options")
        key = body.get("primary_id_property") if isinstance(body, Mapping) else None
        if not isinstance(key, str) or not key:
            raise ValueError("update mode requires a primary_id_property")
        return Update(primary_id_property=key)
    raise ValueError(f"Unknown mode: {value!r}")


class SourceConfigPayload(ProtocolModel):
    api_token: str | None = None
    database: str
    notion_version: str | None = None
    base_url: str | None = None
    timeout_seconds: float | None = None

    def to_config(self) -> NotionConfig:
        return get_notion_config(
            database=self.database,
            api_token=self.api_token,
            notion_version=self.notion_version,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
        )


class VersionPayload(ProtocolModel):
    id: str
    last_edited_time: datetime

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        return parse_collection_id(value) or value

    @field_validator("last_edited_time")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @field_serializer("last_edited_time")
    def _serialize_timestamp(self, value: datetime) -> str:
        return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @classmethod
    def from_version(cls, version: Version) -> VersionPayload:
        return cls(id=version.collection_id, last_edited_time=version.last_edited_time)

    def to_version(self) -> Version:
        return Version(collection_id=self.id, last_edited_time=self.last_edited_time)


class OutParams(ProtocolModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, arbitrary_types_allowed=True)

    path: str = "out.json"
    mode: Mode = Field(default_factory=Append)

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: object) -> Mode:
        return parse_mode(value)


class CheckRequest(ProtocolModel):
    source: SourceConfigPayload
    version: VersionPayload | None = None


class InRequest(ProtocolModel):
    source: SourceConfigPayload
    version: VersionPayload
    params: dict[str, Any] | None = None


class OutRequest(ProtocolModel):
    source: SourceConfigPayload
    params: OutParams = Field(default_factory=OutParams)

    @field_validator("params", mode="before")
    @classmethod
    def _default_params(cls, value: object) -> object:
        return {} if value is None else value


class MetadataItem(ProtocolModel):
    name: str
    value: str


class VersionResponse(ProtocolModel):
    version: VersionPayload
    metadata: list[MetadataItem] = Field(default_factory=list)


def metadata(**values: object) -> list[MetadataItem]:
    return [MetadataItem(name=name, value=str(value)) for name, value in values.items()]
