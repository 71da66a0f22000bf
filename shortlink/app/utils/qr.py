import base64
import io

import qrcode

from shortlink.app.core.config import settings


class PngQrRenderer:
    """Encodes a string as a QR code PNG, returned as a ``data:`` URI for ``<img src>``."""

    def __init__(self, box_size: int | None = None, border: int | None = None) -> None:
        self.box_size = box_size or settings.QR_BOX_SIZE
        self.border = settings.QR_BORDER if border is None else border

    def render(self, data: str) -> str:
        img = qrcode.make(data, box_size=self.box_size, border=self.border)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        img_b64 = base64.b64encode(buf.getvalue()).decode("utf-8")
        return f"data:image/png;base64,{img_b64}"
