from .error import APIValidationError, CommonHTTPError, ValidationErrorDetail
from .url import ApiResponse, CreateLinkRequest, ShortLink


__all__ = [
    "APIValidationError",
    "ApiResponse",
    "CommonHTTPError",
    "CreateLinkRequest",
    "ShortLink",
    "ValidationErrorDetail",
]
