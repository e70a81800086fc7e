from __future__ import annotations

import pytest

from notion_resource.config.notion import NotionConfig, get_notion_config
from tests.helpers.record_store import COLLECTION_ID, FakeRecordStore, make_collection


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore([make_collection()])


@pytest.fixture
def notion_config() -> NotionConfig:
    return get_notion_config(api_token="secret-token", database=COLLECTION_ID)
