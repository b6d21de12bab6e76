import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoticeCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str | None = None


class NoticeUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=3, max_length=200)
    content: str | None = None


class NoticeAuthor(BaseModel):
    id: uuid.UUID
    email: str

    model_config = ConfigDict(from_attributes=True)


class NoticeResponse(BaseModel):
    id: uuid.UUID
    title: str
    content: str | None
    published: bool
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime
    created_by: NoticeAuthor | None = None

    model_config = ConfigDict(from_attributes=True)
