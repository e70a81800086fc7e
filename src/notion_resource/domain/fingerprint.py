"""Resolve database references and derive their version fingerprint."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .errors import AmbiguousReferenceError, NotFoundError, ResolutionError
from .types import Version, parse_collection_id

if TYPE_CHECKING:
    from .ports import RecordStore
    from .types import Collection

log = getLogger(__name__)


def resolve_collection(store: RecordStore, collection_ref: str) -> Collection:
    """Map an id or an exact database title to exactly one collection.

    A reference that parses as an id is looked up directly and never falls back
    to a name search.
    """

    reference = collection_ref.strip() if collection_ref else ""
    if not reference:
        raise ResolutionError("Database reference is empty")

    collection_id = parse_collection_id(reference)
    if collection_id is not None:
        log.debug("Looking up database by id %s", collection_id)
        return store.get_collection(collection_id)

    log.debug("Searching database by name %r", reference)
    matches = [
        collection
        for collection in store.search_collections(reference)
        if collection.title == reference
    ]
    if not matches:
        raise NotFoundError(f"Couldn't find a database named {reference!r}")
    if len(matches) > 1:
        raise AmbiguousReferenceError(reference, [match.id for match in matches])
    return matches[0]


def check(store: RecordStore, collection_ref: str) -> Version:
    """Return the current version of the referenced collection."""

    collection = resolve_collection(store, collection_ref)
    version = Version.of(collection)
    log.info(
        "Database %r (%s) last edited at %s",
        collection.title,
        version.collection_id,
        version.last_edited_time.isoformat(),
    )
    return version
