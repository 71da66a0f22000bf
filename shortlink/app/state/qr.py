from pydantic import BaseModel

from shortlink.app.state.store import Store


class QrState(BaseModel):
    selected_short_code: str | None = None

    class Config:
        frozen = True


class QrRevealController(Store[QrState]):
    """Shows the QR code of at most one link at a time."""

    def __init__(self) -> None:
        super().__init__(QrState())

    @property
    def selected_short_code(self) -> str | None:
        return self.state.selected_short_code

    def is_selected(self, short_code: str) -> bool:
        return self.state.selected_short_code == short_code

    def toggle(self, short_code: str) -> str | None:
        selected = None if self.is_selected(short_code) else short_code
        return self._update(selected_short_code=selected).selected_short_code

    def clear(self) -> None:
        if self.state.selected_short_code is not None:
            self._update(selected_short_code=None)
