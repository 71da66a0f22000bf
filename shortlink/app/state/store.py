from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel


StateT = TypeVar("StateT", bound=BaseModel)

Listener = Callable[[StateT], None]


class Store(Generic[StateT]):
    """Holds one immutable state snapshot and notifies subscribers on every change.

    Rendering code reads :attr:`state` and re-renders from listener callbacks; it never
    mutates the snapshot itself.
    """

    def __init__(self, initial: StateT) -> None:
        self._state = initial
        self._listeners: list[Listener[StateT]] = []

    @property
    def state(self) -> StateT:
        return self._state

    def subscribe(self, listener: Listener[StateT]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes: Any) -> StateT:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state
