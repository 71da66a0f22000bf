from .client import LinkServiceClient
from .exceptions import (
    LinkServiceError,
    LinkValidationError,
    ServiceError,
    SubmissionInProgressError,
    TransportError,
)


__all__ = [
    "LinkServiceClient",
    "LinkServiceError",
    "LinkValidationError",
    "ServiceError",
    "SubmissionInProgressError",
    "TransportError",
]
