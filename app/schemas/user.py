import uuid
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.user import Role


# 🔹 유저 응답용 (필요한 필드만)
class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone: str | None
    role: Role
    is_active: bool
    is_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MeResponse(UserResponse):
    profile: dict | None = None


# 🔹 역할별 프로필 입력
class AdminProfileIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    designation: str | None = Field(default=None, max_length=100)
    profile_image: str | None = Field(default=None, max_length=500)


class MentorProfileIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    expertise: str = Field(..., min_length=1, max_length=200)
    bio: str | None = None
    learning_track_id: uuid.UUID | None = None
    profile_image: str | None = Field(default=None, max_length=500)


class ModeratorProfileIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    responsibility: str | None = Field(default=None, max_length=200)
    profile_image: str | None = Field(default=None, max_length=500)


class MemberProfileIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    student_id: str = Field(..., min_length=1, max_length=30)
    department_id: uuid.UUID
    session_id: uuid.UUID
    learning_track_id: uuid.UUID | None = None
    profile_image: str | None = Field(default=None, max_length=500)


class _RoleBasedUserBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=64)
    phone: str | None = Field(default=None, max_length=30)


class CreateAdminRequest(_RoleBasedUserBase):
    role: Literal["ADMIN"]
    profile: AdminProfileIn = Field(default_factory=AdminProfileIn)


class CreateMentorRequest(_RoleBasedUserBase):
    role: Literal["MENTOR"]
    profile: MentorProfileIn


class CreateModeratorRequest(_RoleBasedUserBase):
    role: Literal["MODERATOR"]
    profile: ModeratorProfileIn = Field(default_factory=ModeratorProfileIn)


class CreateMemberRequest(_RoleBasedUserBase):
    role: Literal["MEMBER"]
    profile: MemberProfileIn


# role 값으로 프로필 타입이 결정되는 요청 본문
RoleBasedUserCreate = Annotated[
    Union[CreateAdminRequest, CreateMentorRequest, CreateModeratorRequest, CreateMemberRequest],
    Field(discriminator="role"),
]
