import json
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from shortlink.app.main import app
from shortlink.app.services.client import LinkServiceClient
from shortlink.app.web.deps import get_link_client, get_workspaces
from shortlink.app.web.sessions import WorkspaceRegistry


BASE_URL = "http://backend.test/api"

Handler = Callable[[httpx.Request], httpx.Response]


def envelope(data: Any = None, *, success: bool = True, message: str = "ok", status_code: int = 200) -> httpx.Response:
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    return httpx.Response(status_code, json=body)


def link_payload(id: int, short_code: str, **overrides: Any) -> dict[str, Any]:  # noqa: A002
    payload = {
        "id": id,
        "long_url": f"https://example.com/{short_code}",
        "short_code": short_code,
        "short_url": f"http://host/{short_code}",
        "created_at": "2024-01-01T00:00:00Z",
        "expires_at": None,
    }
    payload.update(overrides)
    return payload


class FakeBackend:
    """Routes requests to per-endpoint handlers and records every call."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Handler] = {}

    def on(self, method: str, path: str, handler: Handler | httpx.Response) -> None:
        if isinstance(handler, httpx.Response):
            template = handler
            self.routes[(method, path)] = lambda _: httpx.Response(
                template.status_code,
                headers=template.headers,
                content=template.content,
            )
        else:
            self.routes[(method, path)] = handler

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and (path is None or request.url.path == path)
        ]

    def json_body(self, request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return envelope(success=False, message="not found", status_code=404)
        return handler(request)


class MemoryStorage:
    def __init__(self, **values: str) -> None:
        self.values = dict(values)
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes += 1


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def link_client(backend: FakeBackend) -> LinkServiceClient:
    return LinkServiceClient(BASE_URL, transport=httpx.MockTransport(backend))


@pytest.fixture
def workspaces() -> WorkspaceRegistry:
    return WorkspaceRegistry()


@pytest.fixture
def client(link_client: LinkServiceClient, workspaces: WorkspaceRegistry) -> Iterator[TestClient]:
    app.dependency_overrides[get_link_client] = lambda: link_client
    app.dependency_overrides[get_workspaces] = lambda: workspaces
    yield TestClient(app, follow_redirects=False)
    app.dependency_overrides.clear()
