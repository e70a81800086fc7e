"""Push a batch of local records into a collection.

Three strategies decide what happens to the records already in the collection:

- ``Append`` leaves them alone and creates every local record.
- ``Replace`` deletes all of them first, then creates every local record.
- ``Update`` deletes, per local record, the remote records sharing its key
  property value and then creates the local record.

The whole batch is encoded for the store before the first mutation, so a value
that cannot be written aborts the run while the collection is untouched.

Records are never patched in place. Calls are issued strictly one after the
other. Nothing is rolled back when a call fails: the error that aborts the run
keeps its type and carries a ``ReconciliationProgress`` on ``progress`` telling
how many records were deleted, created and fully processed, and which input
index was being handled. Re-running with ``Replace`` or ``Update`` converges on
the intended state.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from .errors import MissingKeyPropertyError, NothingToUpdateError, NotionResourceError
from .fingerprint import resolve_collection
from .properties import property_type
from .types import KeyFilter, ReconciliationProgress, Version

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .ports import RecordStore
    from .types import Collection, Properties

log = getLogger(__name__)


def _create(
    store: RecordStore,
    collection: Collection,
    properties: Properties,
    progress: ReconciliationProgress,
) -> None:
    record = store.create_record(collection.id, properties)
    progress.created += 1
    log.debug("Created record %s", record.id)


@dataclass(frozen=True, slots=True)
class Append:
    """Create every local record; existing records are untouched."""

    name: ClassVar[str] = "append"

    def prepare(
        self,
        store: RecordStore,
        collection: Collection,
        progress: ReconciliationProgress,
    ) -> None:
        return None

    def reconcile_record(
        self,
        store: RecordStore,
        collection: Collection,
        index: int,
        properties: Properties,
        progress: ReconciliationProgress,
    ) -> None:
        _create(store, collection, properties, progress)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Replace:
    """Empty the collection, then create every local record."""

    name: ClassVar[str] = "replace"

    def prepare(
        self,
        store: RecordStore,
        collection: Collection,
        progress: ReconciliationProgress,
    ) -> None:
        existing = store.list_records(collection.id)
        log.info("Deleting %d existing records from %r", len(existing), collection.title)
        for record in existing:
            store.delete_record(record.id)
            progress.deleted += 1

    def reconcile_record(
        self,
        store: RecordStore,
        collection: Collection,
        index: int,
        properties: Properties,
        progress: ReconciliationProgress,
    ) -> None:
        _create(store, collection, properties, progress)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Update:
    """Replace remote records that share the local record's key property value."""

    primary_id_property: str
    name: ClassVar[str] = "update"

    def prepare(
        self,
        store: RecordStore,
        collection: Collection,
        progress: ReconciliationProgress,
    ) -> None:
        return None

    def reconcile_record(
        self,
        store: RecordStore,
        collection: Collection,
        index: int,
        properties: Properties,
        progress: ReconciliationProgress,
    ) -> None:
        key = self.primary_id_property
        if key not in properties:
            raise MissingKeyPropertyError(
                property_name=key,
                index=index,
                available=sorted(properties),
            )

        value = properties[key]
        key_filter = KeyFilter(
            property_name=key,
            value=value,
            property_type=property_type(value) or collection.property_types.get(key),
        )
        matches = store.list_records(collection.id, key_filter=key_filter)
        log.debug("Key %s=%r matches %d records", key, key_filter.canonical, len(matches))
        # all matches must be gone before the create, or the new record could be caught
        for match in matches:
            store.delete_record(match.id)
            progress.deleted += 1
        _create(store, collection, properties, progress)

    def __str__(self) -> str:
        return f"{self.name}({self.primary_id_property})"


type Mode = Append | Replace | Update


def reconcile(
    store: RecordStore,
    collection_ref: str,
    local_records: Sequence[Properties],
    mode: Mode,
    *,
    progress: ReconciliationProgress | None = None,
) -> Version:
    """Apply ``local_records`` to the collection and return its fresh version."""

    if not local_records:
        raise NothingToUpdateError("Nothing to update: the batch contains no records")

    tracker = progress if progress is not None else ReconciliationProgress()
    collection = resolve_collection(store, collection_ref)
    log.info(
        "Reconciling %d records into %r using %s mode",
        len(local_records),
        collection.title,
        mode,
    )

    try:
        encoded: list[Properties] = []
        for index, properties in enumerate(local_records):
            tracker.current_index = index
            encoded.append(store.encode_properties(collection, properties))
        tracker.current_index = None

        mode.prepare(store, collection, tracker)
        for index, properties in enumerate(encoded):
            tracker.current_index = index
            mode.reconcile_record(store, collection, index, properties, tracker)
            tracker.processed += 1
        tracker.current_index = None

        version = Version.of(store.get_collection(collection.id))
    except NotionResourceError as exc:
        exc.progress = tracker
        log.error(
            "Reconciliation aborted at record %s after %d processed "
            "(%d created, %d deleted); nothing was rolled back",
            tracker.current_index,
            tracker.processed,
            tracker.created,
            tracker.deleted,
        )
        raise

    log.info(
        "Reconciled %d records (%d created, %d deleted), database now at %s",
        tracker.processed,
        tracker.created,
        tracker.deleted,
        version.last_edited_time.isoformat(),
    )
    return version
