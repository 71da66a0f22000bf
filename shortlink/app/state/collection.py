import asyncio
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel

from shortlink.app.core import messages
from shortlink.app.core.enums import LoadState
from shortlink.app.schemas.url import ShortLink
from shortlink.app.services.exceptions import LinkServiceError
from shortlink.app.state.store import Store


if TYPE_CHECKING:
    from collections.abc import Iterable

    from shortlink.app.services.client import LinkServiceClient


logger = structlog.get_logger(__name__)


class CollectionState(BaseModel):
    user_id: str | None = None
    links: tuple[ShortLink, ...] = ()
    load_state: LoadState = LoadState.IDLE
    error_message: str | None = None
    stale: bool = False

    class Config:
        frozen = True


def unique_by_id(links: "Iterable[ShortLink]") -> tuple[ShortLink, ...]:
    seen: set[int] = set()
    unique = []
    for link in links:
        if link.id not in seen:
            seen.add(link.id)
            unique.append(link)
    return tuple(unique)


class CollectionManager(Store[CollectionState]):
    """The links one user owns, as last fetched and as changed by confirmed deletes."""

    def __init__(self, client: "LinkServiceClient") -> None:
        super().__init__(CollectionState())
        self._client = client
        self._pending_load: asyncio.Task[None] | None = None
        self._pending_user_id: str | None = None

    @property
    def links(self) -> tuple[ShortLink, ...]:
        return self.state.links

    def find(self, id: int) -> ShortLink | None:  # noqa: A002
        return next((link for link in self.state.links if link.id == id), None)

    def invalidate(self) -> None:
        self._update(stale=True)

    def needs_load(self, user_id: str) -> bool:
        state = self.state
        return (
            state.user_id != user_id
            or state.stale
            or state.load_state is not LoadState.READY
        )

    async def ensure_loaded(self, user_id: str, *, force: bool = False) -> CollectionState:
        if force or self.needs_load(user_id):
            await self.load(user_id)
        return self.state

    async def load(self, user_id: str) -> CollectionState:
        pending = self._pending_load
        if pending is not None and not pending.done() and self._pending_user_id == user_id:
            await pending
            return self.state

        self._pending_user_id = user_id
        self._pending_load = asyncio.ensure_future(self._fetch(user_id))
        await self._pending_load
        return self.state

    async def _fetch(self, user_id: str) -> None:
        links = () if self.state.user_id != user_id else self.state.links
        self._update(user_id=user_id, links=links, load_state=LoadState.LOADING, error_message=None, stale=False)
        try:
            fetched = await self._client.list_user_urls(user_id)
        except LinkServiceError as exc:
            if self.state.user_id != user_id:
                return
            logger.info("Loading short URLs failed", user_id=user_id, error=exc.message)
            self._update(load_state=LoadState.ERROR, error_message=exc.message or messages.LOAD_FAILED)
            return

        if self.state.user_id != user_id:
            logger.debug("Discarding links of a previous user", user_id=user_id)
            return
        self._update(links=unique_by_id(fetched), load_state=LoadState.READY)

    async def remove(self, id: int, user_id: str) -> None:  # noqa: A002
        """Delete on the backend, then drop the entry locally. Failures propagate untouched."""
        await self._client.delete_short_url(id, user_id)
        self._update(links=tuple(link for link in self.state.links if link.id != id))
