"""Port for the remote record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .types import Collection, KeyFilter, Properties, Record


@runtime_checkable
class RecordStore(Protocol):
    """Blocking view of the remote store used by the engines.

    Implementations raise ``NotFoundError`` for missing collections or records and
    ``RemoteCallError`` for every other failed call; nothing is retried.
    """

    def get_collection(self, collection_id: str) -> Collection: ...

    def search_collections(self, query: str) -> list[Collection]: ...

    def list_records(
        self,
        collection_id: str,
        *,
        key_filter: KeyFilter | None = None,
    ) -> list[Record]: ...

    def encode_properties(self, collection: Collection, properties: Properties) -> Properties:
        """Return ``properties`` in the shape ``create_record`` accepts for ``collection``.

        Called for the whole batch before the first mutation, so a value that cannot
        be written aborts the run while the collection is still untouched.
        """
        ...

    def create_record(self, collection_id: str, properties: Properties) -> Record: ...

    def delete_record(self, record_id: str) -> None: ...


__all__ = ["RecordStore"]
