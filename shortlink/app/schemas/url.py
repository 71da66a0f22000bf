import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, field_validator


T = TypeVar("T")


class ShortLink(BaseModel):
    id: int
    long_url: str
    short_code: str
    short_url: str
    created_at: datetime.datetime
    expires_at: datetime.datetime | None = None

    @field_validator("created_at", "expires_at")
    @classmethod
    def assume_utc(cls, value: datetime.datetime | None) -> datetime.datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=datetime.UTC)
        return value

    class Config:
        frozen = True
        extra = "ignore"


class CreateLinkRequest(BaseModel):
    long_url: str
    custom_code: str | None = None
    timeout: int | None = None
    user_id: str

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class ApiResponse(BaseModel, Generic[T]):
    """Uniform ``{success, message, data}`` wrapper of every backend response."""

    success: bool
    message: str = ""
    data: T | None = None
