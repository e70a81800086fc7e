"""Value types shared by the fingerprint, retrieval and reconciliation engines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import UUID

from .properties import canonical_value, property_type

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

type Properties = dict[str, Any]

_HEX_ID = re.compile(
    r"[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}"
)
_URL_TAIL = re.compile(r"[0-9a-fA-F]{32}$")


def parse_collection_id(reference: str) -> str | None:
    """Return the dashed UUID form of ``reference`` or ``None`` if it is not an id.

    Accepts 32 hex digits with or without dashes, and database URLs whose last
    path segment ends with such an id (``.../My-Table-<id>?v=...``).
    """

    candidate = reference.strip()
    if "/" in candidate:
        candidate = candidate.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
        match = _URL_TAIL.search(candidate)
        if match is None:
            return None
        candidate = match.group(0)
    elif _HEX_ID.fullmatch(candidate) is None:
        return None
    try:
        return str(UUID(candidate))
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class Collection:
    """Remote database metadata as observed at one point in time."""

    id: str
    title: str
    last_edited_time: datetime
    property_types: Mapping[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True, slots=True)
class Version:
    """Fingerprint of a collection's observed state."""

    collection_id: str
    last_edited_time: datetime

    @classmethod
    def of(cls, collection: Collection) -> Version:
        return cls(collection_id=collection.id, last_edited_time=collection.last_edited_time)


@dataclass(slots=True, kw_only=True)
class Record:
    """One entry of a collection with its typed properties."""

    id: str
    properties: Properties
    created_time: datetime | None = None
    last_edited_time: datetime | None = None
    url: str | None = None


@dataclass(frozen=True, slots=True)
class KeyFilter:
    """Exact-match lookup of records by one property value."""

    property_name: str
    value: object
    property_type: str | None = None

    @property
    def canonical(self) -> str:
        return canonical_value(self.value)

    @property
    def effective_type(self) -> str | None:
        return property_type(self.value) or self.property_type


@dataclass(slots=True)
class ReconciliationProgress:
    """How far a reconciliation run got; attached to errors that abort it."""

    deleted: int = 0
    created: int = 0
    processed: int = 0
    current_index: int | None = None
