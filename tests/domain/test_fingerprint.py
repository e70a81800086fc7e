from __future__ import annotations

import pytest

from notion_resource.domain.errors import (
    AmbiguousReferenceError,
    NotFoundError,
    ResolutionError,
)
from notion_resource.domain.fingerprint import check, resolve_collection
from notion_resource.domain.types import Version
from tests.helpers.record_store import (
    BASE_TIME,
    COLLECTION_ID,
    OTHER_COLLECTION_ID,
    FakeRecordStore,
    make_collection,
)


def test_check_returns_id_and_last_edited_time(store: FakeRecordStore) -> None:
    version = check(store, COLLECTION_ID)

    assert version == Version(collection_id=COLLECTION_ID, last_edited_time=BASE_TIME)


def test_check_is_idempotent_without_mutation(store: FakeRecordStore) -> None:
    assert check(store, COLLECTION_ID) == check(store, COLLECTION_ID)


def test_check_changes_after_mutation(store: FakeRecordStore) -> None:
    before = check(store, COLLECTION_ID)
    store.create_record(COLLECTION_ID, {"name": "A"})

    assert check(store, COLLECTION_ID) != before


@pytest.mark.parametrize(
    "reference",
    [
        COLLECTION_ID,
        COLLECTION_ID.replace("-", ""),
        COLLECTION_ID.upper(),
        f"  {COLLECTION_ID}  ",
        f"https://www.notion.so/acme/Releases-{COLLECTION_ID.replace('-', '')}?v=abc",
    ],
)
def test_id_spellings_resolve_to_same_collection(
    store: FakeRecordStore, reference: str
) -> None:
    collection = resolve_collection(store, reference)

    assert collection.id == COLLECTION_ID
    assert store.calls == [("get_collection", COLLECTION_ID)]


def test_unknown_id_does_not_fall_back_to_name_search() -> None:
    store = FakeRecordStore([make_collection(title=OTHER_COLLECTION_ID)])

    with pytest.raises(NotFoundError):
        resolve_collection(store, OTHER_COLLECTION_ID)

    assert [call[0] for call in store.calls] == ["get_collection"]


def test_name_resolution_requires_exact_title() -> None:
    store = FakeRecordStore(
        [
            make_collection(title="Releases"),
            make_collection(OTHER_COLLECTION_ID, title="Releases (archive)"),
        ]
    )

    collection = resolve_collection(store, "Releases")

    assert collection.id == COLLECTION_ID
    assert store.calls == [("search_collections", "Releases")]


def test_name_resolution_with_two_exact_matches_is_ambiguous() -> None:
    store = FakeRecordStore(
        [
            make_collection(title="Releases"),
            make_collection(OTHER_COLLECTION_ID, title="Releases"),
        ]
    )

    with pytest.raises(AmbiguousReferenceError) as excinfo:
        resolve_collection(store, "Releases")

    assert set(excinfo.value.candidates) == {COLLECTION_ID, OTHER_COLLECTION_ID}
    assert "2 matches" in str(excinfo.value)


def test_name_resolution_without_match_is_not_found(store: FakeRecordStore) -> None:
    with pytest.raises(NotFoundError, match="Rel"):
        resolve_collection(store, "Rel")


@pytest.mark.parametrize("reference", ["", "   "])
def test_blank_reference_is_a_resolution_error(store: FakeRecordStore, reference: str) -> None:
    with pytest.raises(ResolutionError, match="empty"):
        check(store, reference)

    assert store.calls == []
