import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.membership import ApplicationStatus
from app.schemas.common import PageMeta


# 신청서 제출 / 재제출 요청 (허용되지 않은 필드는 422)
class ApplicationSubmitRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    student_id: str = Field(..., min_length=1, max_length=30, examples=["2024-CSE-017"])
    department_id: uuid.UUID
    session_id: uuid.UUID
    learning_track_id: uuid.UUID | None = None
    phone_number: str | None = Field(default=None, max_length=30)
    profile_image: str | None = Field(default=None, max_length=500)
    motivation: str | None = Field(default=None, max_length=2000)


class ApplicationRejectRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    review_comment: str = Field(..., max_length=1000)


# 관리자 목록 조회 필터 (search_term 외에는 equality 필터)
class ApplicationFilter(BaseModel):
    model_config = ConfigDict(extra="forbid")

    search_term: str | None = None
    status: ApplicationStatus | None = None
    department_id: uuid.UUID | None = None
    session_id: uuid.UUID | None = None
    learning_track_id: uuid.UUID | None = None


class ApplicantSummary(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class ApplicationResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    student_id: str
    department_id: uuid.UUID
    session_id: uuid.UUID
    learning_track_id: uuid.UUID | None
    phone_number: str | None
    profile_image: str | None
    motivation: str | None
    status: ApplicationStatus
    review_comment: str | None
    reviewed_at: datetime | None
    created_at: datetime
    updated_at: datetime
    user: ApplicantSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class ApplicationPage(BaseModel):
    data: list[ApplicationResponse]
    meta: PageMeta
