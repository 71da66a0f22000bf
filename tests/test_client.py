import datetime

import httpx
import pytest
import structlog

from shortlink.app.schemas.url import CreateLinkRequest
from shortlink.app.services.client import LinkServiceClient
from shortlink.app.services.exceptions import LinkServiceError, ServiceError, TransportError
from tests.conftest import BASE_URL, FakeBackend, envelope, link_payload


@pytest.mark.anyio
async def test_create_posts_request_and_returns_link(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on(
        "POST",
        "/api/shorten",
        envelope(
            {
                "id": 1,
                "long_url": "https://example.com",
                "short_code": "abc123",
                "short_url": "http://host/abc123",
                "created_at": "2024-01-01T00:00:00Z",
            },
            message="Short URL created successfully",
        ),
    )

    link = await link_client.create_short_url(CreateLinkRequest(long_url="https://example.com", user_id="u1"))

    assert link.id == 1
    assert link.short_code == "abc123"
    assert link.short_url == "http://host/abc123"
    assert link.created_at == datetime.datetime(2024, 1, 1, tzinfo=datetime.UTC)
    assert link.expires_at is None

    (request,) = backend.calls("POST", "/api/shorten")
    assert backend.json_body(request) == {"long_url": "https://example.com", "user_id": "u1"}


@pytest.mark.anyio
async def test_create_sends_optional_fields_when_present(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("POST", "/api/shorten", envelope(link_payload(7, "mine")))

    await link_client.create_short_url(
        CreateLinkRequest(long_url="https://example.com", custom_code="mine", timeout=3600, user_id="u1"),
    )

    (request,) = backend.calls("POST")
    assert backend.json_body(request) == {
        "long_url": "https://example.com",
        "custom_code": "mine",
        "timeout": 3600,
        "user_id": "u1",
    }


@pytest.mark.anyio
async def test_create_failure_envelope_raises_service_error(
    backend: FakeBackend,
    link_client: LinkServiceClient,
) -> None:
    backend.on("POST", "/api/shorten", envelope(success=False, message="短码已被占用", status_code=400))

    with pytest.raises(ServiceError) as exc_info:
        await link_client.create_short_url(CreateLinkRequest(long_url="https://example.com", user_id="u1"))

    assert exc_info.value.message == "短码已被占用"


@pytest.mark.anyio
async def test_success_false_is_failure_even_with_http_ok(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("GET", "/api/urls/u1", envelope(success=False, message="Database error", status_code=200))

    with pytest.raises(ServiceError, match="Database error"):
        await link_client.list_user_urls("u1")


@pytest.mark.anyio
async def test_create_without_data_is_transport_error(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("POST", "/api/shorten", envelope())

    with pytest.raises(TransportError):
        await link_client.create_short_url(CreateLinkRequest(long_url="https://example.com", user_id="u1"))


@pytest.mark.anyio
async def test_list_preserves_backend_order(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("GET", "/api/urls/u1", envelope([link_payload(5, "e"), link_payload(2, "b"), link_payload(9, "i")]))

    links = await link_client.list_user_urls("u1")

    assert [link.id for link in links] == [5, 2, 9]


@pytest.mark.anyio
async def test_list_without_data_is_empty(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("GET", "/api/urls/u1", envelope())

    assert await link_client.list_user_urls("u1") == []


@pytest.mark.anyio
async def test_list_quotes_user_id(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("GET", "/api/urls/a b", envelope([]))

    await link_client.list_user_urls("a b")

    (request,) = backend.calls("GET")
    assert request.url.raw_path == b"/api/urls/a%20b"


@pytest.mark.anyio
async def test_delete_hits_id_and_user(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("DELETE", "/api/urls/3/u1", envelope(message="URL deleted successfully"))

    assert await link_client.delete_short_url(3, "u1") is None
    assert len(backend.calls("DELETE", "/api/urls/3/u1")) == 1


@pytest.mark.anyio
async def test_delete_not_owned_raises(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on(
        "DELETE",
        "/api/urls/3/u1",
        envelope(success=False, message="URL not found or not owned by user", status_code=404),
    )

    with pytest.raises(ServiceError, match="not owned"):
        await link_client.delete_short_url(3, "u1")


@pytest.mark.anyio
async def test_non_json_body_is_transport_error(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("GET", "/api/urls/u1", httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(TransportError) as exc_info:
        await link_client.list_user_urls("u1")

    assert exc_info.value.message is None


@pytest.mark.anyio
async def test_network_failure_is_transport_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with LinkServiceClient(BASE_URL, transport=httpx.MockTransport(refuse)) as client:
        with pytest.raises(LinkServiceError) as exc_info:
            await client.list_user_urls("u1")

    assert isinstance(exc_info.value, TransportError)
    assert exc_info.value.message is None


@pytest.mark.anyio
async def test_forwards_bound_request_id(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    backend.on("GET", "/api/urls/u1", envelope([]))

    with structlog.contextvars.bound_contextvars(request_id="req-42"):
        await link_client.list_user_urls("u1")

    (request,) = backend.calls("GET")
    assert request.headers["X-Request-ID"] == "req-42"


def test_qr_code_asset_ref_is_deterministic_and_offline(backend: FakeBackend, link_client: LinkServiceClient) -> None:
    assert link_client.qr_code_asset_ref("abc123") == f"{BASE_URL}/qrcode/abc123"
    assert link_client.qr_code_asset_ref("abc123") == link_client.qr_code_asset_ref("abc123")
    assert link_client.qr_code_asset_ref("a/b") == f"{BASE_URL}/qrcode/a%2Fb"
    assert backend.requests == []


def test_base_url_trailing_slash_is_ignored() -> None:
    assert LinkServiceClient("http://backend.test/api/").qr_code_asset_ref("x") == "http://backend.test/api/qrcode/x"
