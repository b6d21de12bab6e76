import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DepartmentCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, examples=["Computer Science & Engineering"])


class DepartmentResponse(BaseModel):
    id: uuid.UUID
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DepartmentWithCounts(DepartmentResponse):
    member_count: int = 0
    application_count: int = 0


class SessionCreateRequest(BaseModel):
    name: str = Field(..., examples=["24-25"])


class SessionResponse(BaseModel):
    id: uuid.UUID
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LearningTrackCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100, examples=["Web Development"])
    short_desc: str | None = Field(default=None, max_length=255)
    long_desc: str | None = None
    duration: str | None = Field(default=None, max_length=50)
    difficulty: str | None = Field(default=None, max_length=30)
    icon: str | None = Field(default=None, max_length=255)
    is_active: bool = True


class LearningTrackUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    short_desc: str | None = Field(default=None, max_length=255)
    long_desc: str | None = None
    duration: str | None = Field(default=None, max_length=50)
    difficulty: str | None = Field(default=None, max_length=30)
    icon: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None


class LearningTrackResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    short_desc: str | None
    long_desc: str | None
    duration: str | None
    difficulty: str | None
    icon: str | None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
