from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from notion_resource.adapters.notion import NotionClient
from tests.helpers.notion_api import make_client_factory

if TYPE_CHECKING:
    from collections.abc import Callable

    from notion_resource.config.notion import NotionConfig
    from tests.helpers.notion_api import Handler


@pytest.fixture
def make_notion_client(
    notion_config: NotionConfig,
) -> Callable[[Handler], NotionClient]:
    def build(handler: Handler) -> NotionClient:
        return NotionClient(
            config=notion_config,
            client_factory=make_client_factory(handler),
            page_size=2,
        )

    return build
