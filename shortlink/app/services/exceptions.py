from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from shortlink.app.schemas.error import ValidationErrorDetail


class LinkServiceError(Exception):
    """A link-service call failed; ``message`` is user-facing text when the backend gave one."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or None


class ServiceError(LinkServiceError):
    """The backend answered with ``success=false``."""


class TransportError(LinkServiceError):
    """The backend could not be reached or answered with something that is not an envelope."""


class LinkValidationError(Exception):
    def __init__(self, errors: list["ValidationErrorDetail"]) -> None:
        super().__init__("; ".join(f"{err.location}: {err.message}" for err in errors))
        self.errors = errors


class SubmissionInProgressError(Exception):
    pass
