from .display import LinkView, describe_link, format_timestamp, is_expired, truncated_long_url
from .qr import PngQrRenderer


__all__ = [
    "LinkView",
    "PngQrRenderer",
    "describe_link",
    "format_timestamp",
    "is_expired",
    "truncated_long_url",
]
