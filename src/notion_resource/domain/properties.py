"""Helpers for reading Notion's typed property values."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Final, cast

PROPERTY_TYPES: Final[frozenset[str]] = frozenset(
    {
        "title",
        "rich_text",
        "number",
        "select",
        "status",
        "multi_select",
        "date",
        "people",
        "files",
        "checkbox",
        "url",
        "email",
        "phone_number",
        "relation",
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


def property_type(value: object) -> str | None:
    """Return the Notion type of a property value, or ``None`` for plain scalars."""

    if not isinstance(value, Mapping):
        return None
    declared = value.get("type")
    if isinstance(declared, str) and declared in value:
        return declared
    typed = [key for key in value if key in PROPERTY_TYPES]
    if len(typed) == 1:
        return str(typed[0])
    return None


def plain_text(fragments: object) -> str:
    """Concatenate the text of a rich text array."""

    if not isinstance(fragments, list):
        return ""
    parts: list[str] = []
    for fragment in fragments:
        if not isinstance(fragment, Mapping):
            continue
        text = fragment.get("plain_text")
        if text is None:
            content = fragment.get("text")
            text = content.get("content") if isinstance(content, Mapping) else None
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


def canonical_value(value: object) -> str:
    """Serialize a property value to the string compared by key lookups.

    Typed values are reduced to the part users see (the text of a title, the
    name of a select option, the start of a date), so a value read back from the
    store and the value written from an artifact compare equal.
    """

    kind = property_type(value)
    if kind is None:
        return _canonical_scalar(value)

    payload = cast(Mapping[str, object], value)[kind]
    if kind in {"title", "rich_text"}:
        return plain_text(payload)
    if kind in {"select", "status"}:
        return str(payload.get("name", "")) if isinstance(payload, Mapping) else ""
    if kind == "date":
        return str(payload.get("start", "")) if isinstance(payload, Mapping) else ""
    return _canonical_scalar(payload)


def _canonical_scalar(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int | float | str):
        return str(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
