"""Read a collection after verifying it still matches a checked version."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .errors import ConcurrentModificationError
from .fingerprint import resolve_collection
from .types import Version

if TYPE_CHECKING:
    from .ports import RecordStore
    from .types import Record

log = getLogger(__name__)


def retrieve(store: RecordStore, collection_ref: str, expected_version: Version) -> list[Record]:
    """Return every record of the collection if it is still at ``expected_version``.

    Records come back in the order the store reports them. That order is not
    stable across calls and only suitable for display.
    """

    collection = resolve_collection(store, collection_ref)
    current_version = Version.of(collection)
    if current_version != expected_version:
        raise ConcurrentModificationError(expected=expected_version, actual=current_version)

    records = store.list_records(collection.id)
    log.info("Retrieved %d records from database %r", len(records), collection.title)
    return records
