from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel


if TYPE_CHECKING:
    from pydantic import ValidationError


class ValidationErrorDetail(BaseModel):
    location: str
    message: str
    error_type: str
    context: dict[str, Any] | None = None

    class Config:
        frozen = True


class APIValidationError(BaseModel):
    errors: list[ValidationErrorDetail]

    @classmethod
    def from_pydantic(cls, exc: "ValidationError", location: str | None = None) -> "APIValidationError":
        return cls(
            errors=[
                ValidationErrorDetail(
                    location=location or " -> ".join(map(str, err["loc"])),
                    message=err["msg"],
                    error_type=err["type"],
                    context={key: str(value) for key, value in err["ctx"].items()} if err.get("ctx") else None,
                )
                for err in exc.errors()
            ],
        )

    class Config:
        json_schema_extra: ClassVar[dict[str, Any]] = {
            "example": {
                "errors": [
                    {
                        "location": "long_url",
                        "message": "Input should be a valid URL, relative URL without a base",
                        "error_type": "url_parsing",
                    },
                ],
            },
        }


class CommonHTTPError(BaseModel):
    """JSON response model for errors raised by :class:`starlette.HTTPException`."""

    message: str
    extra: dict[str, Any] | None = None
