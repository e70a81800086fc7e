from __future__ import annotations

from typing import Any

import pytest

from notion_resource.adapters.notion import (
    build_query_filter,
    typed_properties,
    writable_properties,
)
from notion_resource.domain.errors import PropertyValueError, UnsupportedKeyPropertyError
from notion_resource.domain.types import KeyFilter


@pytest.mark.parametrize(
    ("key_filter", "expected"),
    [
        (
            KeyFilter("Name", {"title": [{"plain_text": "Release 1"}]}),
            {"property": "Name", "title": {"equals": "Release 1"}},
        ),
        (
            KeyFilter("Ref", "abc", property_type="rich_text"),
            {"property": "Ref", "rich_text": {"equals": "abc"}},
        ),
        (
            KeyFilter("Stage", {"type": "select", "select": {"name": "Done"}}),
            {"property": "Stage", "select": {"equals": "Done"}},
        ),
        (
            KeyFilter("State", {"status": {"name": "In progress"}}),
            {"property": "State", "status": {"equals": "In progress"}},
        ),
        (
            KeyFilter("Build", {"number": 42.0}),
            {"property": "Build", "number": {"equals": 42}},
        ),
        (
            KeyFilter("Ratio", 0.5, property_type="number"),
            {"property": "Ratio", "number": {"equals": 0.5}},
        ),
        (
            KeyFilter("Shipped", {"checkbox": True}),
            {"property": "Shipped", "checkbox": {"equals": True}},
        ),
        (
            KeyFilter("Day", {"date": {"start": "2024-05-01"}}),
            {"property": "Day", "date": {"equals": "2024-05-01"}},
        ),
        (
            KeyFilter("Mail", "ops@example.com", property_type="email"),
            {"property": "Mail", "email": {"equals": "ops@example.com"}},
        ),
        (
            KeyFilter("Name", {"title": []}),
            {"property": "Name", "title": {"is_empty": True}},
        ),
    ],
)
def test_build_query_filter(key_filter: KeyFilter, expected: dict[str, Any]) -> None:
    assert build_query_filter(key_filter) == expected


@pytest.mark.parametrize(
    "key_filter",
    [
        KeyFilter("Tags", {"multi_select": [{"name": "a"}]}),
        KeyFilter("Link", {"relation": [{"id": "p-1"}]}),
        KeyFilter("Name", "A"),
        KeyFilter("Build", "not-a-number", property_type="number"),
    ],
)
def test_build_query_filter_rejects_unsupported_keys(key_filter: KeyFilter) -> None:
    with pytest.raises(UnsupportedKeyPropertyError, match=key_filter.property_name):
        build_query_filter(key_filter)


def test_writable_properties_keep_values_and_drop_computed_ones() -> None:
    properties = {
        "Name": {"id": "title", "type": "title", "title": [{"plain_text": "A"}]},
        "Tags": {"multi_select": [{"name": "x"}]},
        "Id": {"id": "u", "type": "unique_id", "unique_id": {"prefix": "R", "number": 3}},
        "Edited": {"last_edited_time": "2024-05-01T12:00:00.000Z"},
        "raw": 5,
    }

    assert writable_properties(properties) == {
        "Name": {"type": "title", "title": [{"plain_text": "A"}]},
        "Tags": {"multi_select": [{"name": "x"}]},
        "raw": 5,
    }


SCHEMA = {
    "Name": "title",
    "Notes": "rich_text",
    "Build": "number",
    "Shipped": "checkbox",
    "Link": "url",
    "Stage": "select",
    "State": "status",
    "Day": "date",
    "Tags": "multi_select",
    "Owner": "people",
}


def test_typed_properties_wrap_plain_values_by_schema_type() -> None:
    properties = {
        "Name": "Release 1",
        "Notes": "",
        "Build": 42,
        "Shipped": True,
        "Link": "https://example.com",
        "Stage": "Done",
        "State": None,
        "Day": "2024-05-01",
        "Tags": ["a", "b"],
        "Owner": {"people": []},
    }

    assert typed_properties(properties, SCHEMA) == {
        "Name": {"title": [{"type": "text", "text": {"content": "Release 1"}}]},
        "Notes": {"rich_text": []},
        "Build": {"number": 42},
        "Shipped": {"checkbox": True},
        "Link": {"url": "https://example.com"},
        "Stage": {"select": {"name": "Done"}},
        "State": {"status": None},
        "Day": {"date": {"start": "2024-05-01"}},
        "Tags": {"multi_select": [{"name": "a"}, {"name": "b"}]},
        "Owner": {"people": []},
    }


@pytest.mark.parametrize(
    ("properties", "property_type"),
    [({"Missing": "x"}, None), ({"Owner": "someone"}, "people"), ({"Tags": "a"}, "multi_select")],
)
def test_typed_properties_reject_values_without_a_plain_form(
    properties: dict[str, Any], property_type: str | None
) -> None:
    with pytest.raises(PropertyValueError) as excinfo:
        typed_properties(properties, SCHEMA)

    assert excinfo.value.property_type == property_type
    assert excinfo.value.exit_code == 11
