import secrets
import string
from typing import TYPE_CHECKING

import structlog

from shortlink.app.core.config import settings


if TYPE_CHECKING:
    from fastapi import Request, Response

    from shortlink.app.utils.types import KeyValueStorage


logger = structlog.get_logger(__name__)

USER_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_user_id(prefix: str | None = None, length: int | None = None) -> str:
    """Create a random opaque user token, e.g. ``user_k3j9x0a1b``."""
    prefix = settings.USER_ID_PREFIX if prefix is None else prefix
    length = length or settings.USER_ID_LENGTH
    return prefix + "".join(secrets.choice(USER_ID_ALPHABET) for _ in range(length))


class IdentityProvider:
    """Hands out the device's user id, creating and persisting it on first use.

    The id is a correlation key for "my links", not a credential.
    """

    def __init__(self, storage: "KeyValueStorage", key: str | None = None) -> None:
        self._storage = storage
        self._key = key or settings.USER_ID_STORAGE_KEY
        self._user_id: str | None = None

    def get_or_create_user_id(self) -> str:
        if self._user_id is None:
            user_id = self._storage.get(self._key)
            if not user_id:
                user_id = generate_user_id()
                self._storage.set(self._key, user_id)
                logger.info("Created user identity", user_id=user_id)
            self._user_id = user_id
        return self._user_id


class CookieStorage:
    """Browser cookie jar as the device's durable key-value store.

    Writes are staged until :meth:`commit` copies them onto an outgoing response.
    """

    def __init__(self, request: "Request") -> None:
        self._cookies = dict(request.cookies)
        self._pending: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._pending.get(key, self._cookies.get(key))

    def set(self, key: str, value: str) -> None:
        self._pending[key] = value

    def commit(self, response: "Response") -> "Response":
        for key, value in self._pending.items():
            response.set_cookie(
                key=key,
                value=value,
                max_age=settings.IDENTITY_COOKIE_MAX_AGE,
                httponly=True,
                samesite="lax",
                secure=not settings.DEBUG,
            )
        self._cookies.update(self._pending)
        self._pending.clear()
        return response
