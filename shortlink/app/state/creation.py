from typing import TYPE_CHECKING, Literal

import structlog
from pydantic import AnyUrl, BaseModel, TypeAdapter, ValidationError

from shortlink.app.core import messages
from shortlink.app.core.enums import SubmissionState
from shortlink.app.schemas.error import ValidationErrorDetail
from shortlink.app.schemas.url import CreateLinkRequest, ShortLink
from shortlink.app.services.exceptions import LinkServiceError, LinkValidationError, SubmissionInProgressError
from shortlink.app.state.store import Store


if TYPE_CHECKING:
    from shortlink.app.services.client import LinkServiceClient


logger = structlog.get_logger(__name__)

FormField = Literal["long_url", "custom_code", "timeout_raw"]
FORM_FIELDS: tuple[str, ...] = ("long_url", "custom_code", "timeout_raw")

_url_adapter = TypeAdapter(AnyUrl)


class CreationState(BaseModel):
    long_url: str = ""
    custom_code: str = ""
    timeout_raw: str = ""
    submission_state: SubmissionState = SubmissionState.IDLE
    result: ShortLink | None = None
    error_message: str | None = None
    field_errors: tuple[ValidationErrorDetail, ...] = ()

    @property
    def is_submitting(self) -> bool:
        return self.submission_state is SubmissionState.SUBMITTING

    class Config:
        frozen = True


def validate_long_url(value: str) -> list[ValidationErrorDetail]:
    value = value.strip()
    if not value:
        return [ValidationErrorDetail(location="long_url", message=messages.LONG_URL_REQUIRED, error_type="missing")]
    try:
        url = _url_adapter.validate_python(value)
    except ValidationError as exc:
        return [
            ValidationErrorDetail(location="long_url", message=messages.LONG_URL_INVALID, error_type=err["type"])
            for err in exc.errors()
        ]
    if "://" not in value or not url.host:
        return [ValidationErrorDetail(location="long_url", message=messages.LONG_URL_INVALID, error_type="url_host")]
    return []


def parse_timeout(raw: str) -> int | None:
    """Seconds until expiry, or ``None`` for blank, unparsable or non-positive input."""
    raw = raw.strip()
    if not raw:
        return None
    try:
        timeout = int(raw)
    except ValueError:
        return None
    return timeout if timeout > 0 else None


class CreationFlowController(Store[CreationState]):
    """State of the create-link form, from field edits through one submission."""

    def __init__(self, client: "LinkServiceClient", user_id: str) -> None:
        super().__init__(CreationState())
        self._client = client
        self.user_id = user_id

    def update_field(self, field: FormField, value: str) -> CreationState:
        if field not in FORM_FIELDS:
            raise ValueError(f"Unknown form field {field!r}")
        if self.state.is_submitting:
            raise SubmissionInProgressError
        return self._update(**{field: value})

    def build_request(self) -> CreateLinkRequest:
        state = self.state
        errors = validate_long_url(state.long_url)
        if errors:
            raise LinkValidationError(errors)
        return CreateLinkRequest(
            long_url=state.long_url.strip(),
            custom_code=state.custom_code.strip() or None,
            timeout=parse_timeout(state.timeout_raw),
            user_id=self.user_id,
        )

    async def submit(self) -> ShortLink | None:
        if self.state.is_submitting:
            raise SubmissionInProgressError

        try:
            request = self.build_request()
        except LinkValidationError as exc:
            self._update(field_errors=tuple(exc.errors))
            return None

        self._update(
            submission_state=SubmissionState.SUBMITTING,
            result=None,
            error_message=None,
            field_errors=(),
        )
        try:
            link = await self._client.create_short_url(request)
        except LinkServiceError as exc:
            logger.info("Create short URL failed", user_id=self.user_id, error=exc.message)
            self._update(
                submission_state=SubmissionState.FAILED,
                error_message=exc.message or messages.CREATE_FAILED,
            )
            return None
        except Exception:
            self._update(submission_state=SubmissionState.FAILED, error_message=messages.CREATE_FAILED)
            raise

        self._update(
            submission_state=SubmissionState.SUCCEEDED,
            result=link,
            long_url="",
            custom_code="",
            timeout_raw="",
        )
        return link
