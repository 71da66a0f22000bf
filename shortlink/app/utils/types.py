from typing import Protocol


class KeyValueStorage(Protocol):
    """Durable string storage keyed by a fixed name (cookie jar, local file, ...)."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class QrRenderer(Protocol):
    """Anything able to turn a string into a scannable visual code."""

    def render(self, data: str) -> str: ...
