"""Fake Notion API payloads and transports for client tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

from notion_resource.adapters.http_resilience import ResilienceConfig, ResilientClient

DATABASE_ID = "0d8f6f8a-1c44-4f57-9d2a-3a3b8d0b6c11"

type Handler = Callable[[httpx.Request], httpx.Response]


class RecordingHandler:
    """Dispatch requests to per-route handlers and keep every request."""

    def __init__(self, routes: dict[tuple[str, str], Handler | list[httpx.Response]]) -> None:
        self._routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json=error_payload(404, "object_not_found", "no route"))
        if isinstance(route, list):
            return route.pop(0)
        return route(request)

    def bodies(self, method: str, path: str) -> list[dict[str, Any]]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.method == method and request.url.path == path
        ]


def error_payload(status: int, code: str, message: str) -> dict[str, Any]:
    return {"object": "error", "status": status, "code": code, "message": message}


def database_payload(
    database_id: str = DATABASE_ID,
    *,
    title: str = "Releases",
    last_edited_time: str = "2024-05-01T12:00:00.000Z",
) -> dict[str, Any]:
    return {
        "object": "database",
        "id": database_id,
        "title": [{"type": "text", "text": {"content": title}, "plain_text": title}],
        "last_edited_time": last_edited_time,
        "properties": {
            "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
            "Score": {"id": "a%3Bc", "name": "Score", "type": "number", "number": {}},
        },
        "url": f"https://www.notion.so/{database_id.replace('-', '')}",
    }


def page_payload(page_id: str, name: str) -> dict[str, Any]:
    return {
        "object": "page",
        "id": page_id,
        "created_time": "2024-05-01T12:00:00.000Z",
        "last_edited_time": "2024-05-01T12:00:00.000Z",
        "archived": False,
        "url": f"https://www.notion.so/{page_id}",
        "properties": {
            "Name": {
                "id": "title",
                "type": "title",
                "title": [{"type": "text", "text": {"content": name}, "plain_text": name}],
            },
        },
    }


def query_payload(
    pages: list[dict[str, Any]], *, next_cursor: str | None = None
) -> dict[str, Any]:
    return {
        "object": "list",
        "results": pages,
        "has_more": next_cursor is not None,
        "next_cursor": next_cursor,
    }


def make_client_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(async_handler))

    return factory
