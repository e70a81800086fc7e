"""HTTP client for the Notion API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ValidationError

from notion_resource.adapters.http_resilience import ResilientClient
from notion_resource.domain.errors import NotFoundError, RemoteCallError

from .schema import DatabasePayload, ErrorResponse, PagePayload, QueryResponse, SearchResponse
from .translator import (
    build_query_filter,
    collection_from_payload,
    record_from_payload,
    typed_properties,
    writable_properties,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from notion_resource.config.http_resilience import ResilienceConfig
    from notion_resource.config.notion import NotionConfig
    from notion_resource.domain.types import Collection, KeyFilter, Properties, Record

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class NotionClient:
    """Blocking Notion client used for one check, in or out invocation.

    All calls share one event loop, one connection pool and one rate limiter for
    the lifetime of the ``with`` block. Failed calls are not retried.
    """

    def __init__(
        self,
        *,
        config: NotionConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._page_size = page_size
        self._runner: asyncio.Runner | None = None
        self._client: ResilientClient | None = None

    def __enter__(self) -> NotionClient:
        self._runner = asyncio.Runner()
        self._client = self._client_factory(self._resilience)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        runner, client = self._runner, self._client
        self._runner = None
        self._client = None
        if runner is None:
            return
        try:
            if client is not None:
                runner.run(client.aclose())
        finally:
            runner.close()

    def get_collection(self, collection_id: str) -> Collection:
        payload = self._run(
            lambda client: self._request(
                client,
                "GET",
                f"databases/{collection_id}",
                not_found=f"Database {collection_id} not found",
            )
        )
        database = _validate(DatabasePayload, payload, what="database")
        return collection_from_payload(database)

    def search_collections(self, query: str) -> list[Collection]:
        return self._run(lambda client: self._search_async(client, query))

    def list_records(
        self,
        collection_id: str,
        *,
        key_filter: KeyFilter | None = None,
    ) -> list[Record]:
        body: dict[str, Any] = {"page_size": self._page_size}
        if key_filter is not None:
            body["filter"] = build_query_filter(key_filter)
        return self._run(lambda client: self._query_async(client, collection_id, body))

    def encode_properties(self, collection: Collection, properties: Properties) -> Properties:
        return typed_properties(properties, collection.property_types)

    def create_record(self, collection_id: str, properties: Properties) -> Record:
        body = {
            "parent": {"database_id": collection_id},
            "properties": writable_properties(properties),
        }
        payload = self._run(lambda client: self._request(client, "POST", "pages", json=body))
        return record_from_payload(_validate(PagePayload, payload, what="page"))

    def delete_record(self, record_id: str) -> None:
        self._run(
            lambda client: self._request(
                client,
                "PATCH",
                f"pages/{record_id}",
                json={"archived": True},
                not_found=f"Page {record_id} not found",
            )
        )

    def _run[T](self, call: Callable[[ResilientClient], Awaitable[T]]) -> T:
        if self._runner is None or self._client is None:
            raise RuntimeError("NotionClient must be used as a context manager")
        return self._runner.run(call(self._client))

    async def _search_async(self, client: ResilientClient, query: str) -> list[Collection]:
        collections: list[Collection] = []
        cursor: str | None = None
        while True:
            body: dict[str, Any] = {
                "query": query,
                "filter": {"property": "object", "value": "database"},
                "page_size": self._page_size,
            }
            if cursor is not None:
                body["start_cursor"] = cursor
            payload = await self._request(client, "POST", "search", json=body)
            response = _validate(SearchResponse, payload, what="search")
            for result in response.results:
                if result.get("object") != "database":
                    continue
                database = _validate(DatabasePayload, result, what="database")
                collections.append(collection_from_payload(database))
            if not response.has_more or response.next_cursor is None:
                return collections
            cursor = response.next_cursor

    async def _query_async(
        self,
        client: ResilientClient,
        collection_id: str,
        body: dict[str, Any],
    ) -> list[Record]:
        records: list[Record] = []
        cursor: str | None = None
        while True:
            page_body = dict(body)
            if cursor is not None:
                page_body["start_cursor"] = cursor
            payload = await self._request(
                client,
                "POST",
                f"databases/{collection_id}/query",
                json=page_body,
                not_found=f"Database {collection_id} not found",
            )
            response = _validate(QueryResponse, payload, what="query")
            records.extend(record_from_payload(page) for page in response.results)
            if not response.has_more or response.next_cursor is None:
                return records
            cursor = response.next_cursor

    async def _request(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        *,
        json: object = None,
        not_found: str | None = None,
    ) -> object:
        log.debug("Notion %s %s", method, path)
        try:
            if json is None:
                response = await client.request(method, path)
            else:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise RemoteCallError(f"Notion {method} {path} failed: {exc}") from exc

        if response.is_success:
            try:
                return response.json()
            except ValueError:
                raise RemoteCallError(
                    f"Notion {method} {path} returned a non-JSON body",
                    status_code=response.status_code,
                ) from None

        code, message = _error_details(response)
        log.error(f"Notion API error {response.status_code} ({code}): {message}")
        if response.status_code == 404 and not_found is not None:
            raise NotFoundError(f"{not_found}: {message}")
        raise RemoteCallError(
            f"Notion {method} {path} failed with {response.status_code} ({code}): {message}",
            status_code=response.status_code,
            code=code,
        )


def _error_details(response: httpx.Response) -> tuple[str | None, str]:
    try:
        error = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return None, response.text or response.reason_phrase
    return error.code, error.message


def _validate[M: BaseModel](model: type[M], payload: object, *, what: str) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RemoteCallError(f"Malformed Notion {what} response: {exc}") from exc
