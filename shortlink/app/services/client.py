from types import TracebackType
from typing import Any, Self, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from shortlink.app.core.config import settings
from shortlink.app.schemas.url import ApiResponse, CreateLinkRequest, ShortLink
from shortlink.app.services.exceptions import ServiceError, TransportError


logger = structlog.get_logger(__name__)

T = TypeVar("T")

REQUEST_ID_HEADER = "X-Request-ID"


def _segment(value: str | int) -> str:
    return quote(str(value), safe="")


async def _forward_request_id(request: httpx.Request) -> None:
    request_id = structlog.contextvars.get_contextvars().get("request_id")
    if request_id and REQUEST_ID_HEADER not in request.headers:
        request.headers[REQUEST_ID_HEADER] = request_id


class LinkServiceClient:
    """Typed boundary to the short-link backend.

    Every backend response is a ``{success, message, data}`` envelope. ``success=false``
    is a :class:`ServiceError` whatever the HTTP status; anything that cannot be read as an
    envelope, or never arrives, is a :class:`TransportError`.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            headers={"Accept": "application/json"},
            event_hooks={"request": [_forward_request_id]},
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_short_url(self, request: CreateLinkRequest) -> ShortLink:
        envelope = await self._call("POST", "/shorten", ShortLink, json=request.to_payload())
        if envelope.data is None:
            raise TransportError
        logger.info("Short URL created", short_code=envelope.data.short_code, user_id=request.user_id)
        return envelope.data

    async def list_user_urls(self, user_id: str) -> list[ShortLink]:
        envelope = await self._call("GET", f"/urls/{_segment(user_id)}", list[ShortLink])
        return envelope.data or []

    async def delete_short_url(self, id: int, user_id: str) -> None:  # noqa: A002
        await self._call("DELETE", f"/urls/{_segment(id)}/{_segment(user_id)}", Any)
        logger.info("Short URL deleted", id=id, user_id=user_id)

    def qr_code_asset_ref(self, short_code: str) -> str:
        return f"{self.base_url}/qrcode/{_segment(short_code)}"

    async def _call(
        self,
        method: str,
        path: str,
        data_type: type[T],
        *,
        json: dict[str, Any] | None = None,
    ) -> ApiResponse[T]:
        log = logger.bind(method=method, path=path)
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            log.warning("Link service unreachable", error=str(exc))
            raise TransportError from exc

        try:
            envelope = ApiResponse[data_type].model_validate_json(response.content)  # type: ignore[valid-type]
        except ValidationError as exc:
            log.warning("Malformed link service response", status_code=response.status_code, error=str(exc))
            raise TransportError from exc

        if not envelope.success:
            log.info("Link service refused request", status_code=response.status_code, message=envelope.message)
            raise ServiceError(envelope.message)
        return envelope
