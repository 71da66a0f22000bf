"""Values derived from a :class:`ShortLink` for display.

All of these depend on the wall clock or on settings, so they are computed each time a
link is rendered and never stored.
"""

import datetime
from dataclasses import dataclass

from shortlink.app.core.config import settings
from shortlink.app.schemas.url import ShortLink


ELLIPSIS = "…"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def is_expired(link: ShortLink, now: datetime.datetime | None = None) -> bool:
    if link.expires_at is None:
        return False
    now = now or datetime.datetime.now(datetime.UTC)
    return now >= link.expires_at


def truncated_long_url(link: ShortLink, max_length: int | None = None) -> str:
    max_length = max_length or settings.LONG_URL_DISPLAY_LENGTH
    if len(link.long_url) <= max_length:
        return link.long_url
    return link.long_url[:max_length] + ELLIPSIS


def format_timestamp(value: datetime.datetime, tz: datetime.tzinfo | None = None) -> str:
    return value.astimezone(tz).strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class LinkView:
    link: ShortLink
    display_url: str
    created: str
    expires: str | None
    expired: bool


def describe_link(
    link: ShortLink,
    now: datetime.datetime | None = None,
    tz: datetime.tzinfo | None = None,
) -> LinkView:
    return LinkView(
        link=link,
        display_url=truncated_long_url(link),
        created=format_timestamp(link.created_at, tz),
        expires=format_timestamp(link.expires_at, tz) if link.expires_at else None,
        expired=is_expired(link, now),
    )
