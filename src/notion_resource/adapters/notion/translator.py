"""Translate between Notion payloads and domain types."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final

from notion_resource.domain.errors import PropertyValueError, UnsupportedKeyPropertyError
from notion_resource.domain.properties import canonical_value, property_type
from notion_resource.domain.types import Collection, Record, parse_collection_id

if TYPE_CHECKING:
    from notion_resource.domain.types import KeyFilter, Properties

    from .schema import DatabasePayload, PagePayload

# Computed by Notion; rejected when creating pages.
READ_ONLY_PROPERTY_TYPES: Final[frozenset[str]] = frozenset(
    {
        "formula",
        "rollup",
        "created_time",
        "created_by",
        "last_edited_time",
        "last_edited_by",
        "unique_id",
        "verification",
        "button",
    }
)

_STRING_EQUALS_TYPES: Final[frozenset[str]] = frozenset(
    {"title", "rich_text", "url", "email", "phone_number", "select", "status", "date"}
)
_TEXT_TYPES: Final[frozenset[str]] = frozenset({"title", "rich_text"})
_OPTION_TYPES: Final[frozenset[str]] = frozenset({"select", "status"})
_VERBATIM_TYPES: Final[frozenset[str]] = frozenset(
    {"number", "checkbox", "url", "email", "phone_number"}
)


def collection_from_payload(payload: DatabasePayload) -> Collection:
    return Collection(
        id=parse_collection_id(payload.id) or payload.id,
        title=payload.title_plain_text,
        last_edited_time=payload.last_edited_time,
        property_types={name: prop.type for name, prop in payload.properties.items()},
    )


def record_from_payload(payload: PagePayload) -> Record:
    return Record(
        id=payload.id,
        properties=payload.properties,
        created_time=payload.created_time,
        last_edited_time=payload.last_edited_time,
        url=payload.url,
    )


def writable_properties(properties: Properties) -> dict[str, Any]:
    """Drop computed properties and store-assigned property ids before a create."""

    writable: dict[str, Any] = {}
    for name, value in properties.items():
        if property_type(value) in READ_ONLY_PROPERTY_TYPES:
            continue
        if isinstance(value, Mapping):
            writable[name] = {key: item for key, item in value.items() if key != "id"}
        else:
            writable[name] = value
    return writable


def typed_properties(
    properties: Properties,
    property_types: Mapping[str, str],
) -> Properties:
    """Wrap plain values in the payload their schema type expects.

    Values that already are objects pass through unchanged. A plain value for a
    property the schema does not know, or whose type has no plain form, raises
    ``PropertyValueError``.
    """

    typed: Properties = {}
    for name, value in properties.items():
        if isinstance(value, Mapping):
            typed[name] = value
            continue
        kind = property_types.get(name)
        if kind is None:
            raise PropertyValueError(property_name=name, property_type=None, value=value)
        typed[name] = {kind: _typed_value(name, value, kind)}
    return typed


def _typed_value(name: str, value: object, kind: str) -> object:
    if kind in _TEXT_TYPES:
        text = canonical_value(value)
        return [{"type": "text", "text": {"content": text}}] if text else []
    if kind in _VERBATIM_TYPES:
        return value
    if kind in _OPTION_TYPES:
        return {"name": canonical_value(value)} if value is not None else None
    if kind == "date":
        return {"start": canonical_value(value)} if value is not None else None
    if kind == "multi_select" and isinstance(value, list):
        return [{"name": canonical_value(item)} for item in value]
    raise PropertyValueError(property_name=name, property_type=kind, value=value)


def build_query_filter(key_filter: KeyFilter) -> dict[str, Any]:
    """Return the database query filter selecting records whose key equals the value."""

    kind = key_filter.effective_type
    canonical = key_filter.canonical
    name = key_filter.property_name

    if kind in _STRING_EQUALS_TYPES:
        condition: dict[str, Any] = {"equals": canonical} if canonical else {"is_empty": True}
        return {"property": name, kind: condition}
    if kind == "number":
        if not canonical:
            return {"property": name, "number": {"is_empty": True}}
        try:
            number = float(canonical)
        except ValueError:
            raise UnsupportedKeyPropertyError(property_name=name, property_type=kind) from None
        equals = int(number) if number.is_integer() else number
        return {"property": name, "number": {"equals": equals}}
    if kind == "checkbox":
        return {"property": name, "checkbox": {"equals": canonical == "true"}}

    raise UnsupportedKeyPropertyError(property_name=name, property_type=kind)
