from datetime import datetime
from typing import Generic, TypeVar
from pydantic import BaseModel, Field

T = TypeVar('T')


class ResponseMeta(BaseModel):
    request_id: str | None = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    warnings: list[str] = Field(default_factory=list)


class APIError(BaseModel):
    code: str
    message: str
    details: dict | None = None


class APIResponse(BaseModel, Generic[T]):
    """Envelope shared by successful responses and the domain error handler."""

    data: T | None = None
    meta: ResponseMeta | None = None
    errors: list[APIError] = Field(default_factory=list)

    @classmethod
    def ok(cls, data: T, warnings: list[str] | None = None) -> "APIResponse[T]":
        return cls(data=data, meta=ResponseMeta(warnings=warnings or []))
