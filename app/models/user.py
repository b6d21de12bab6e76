"""
user.py

사용자(User) 및 권한(Role) 모델 정의 파일.

이 파일은 동아리 사용자의 기본 정보와
권한(Role), 이메일 인증 여부, 활성/탈퇴 상태(Soft Delete), 토큰 버전을 관리한다.

모든 인증, 권한, 가입 신청, 관리자 기능의 기준이 되는 핵심 모델이다.

"""

import uuid
import datetime
from enum import Enum

from sqlalchemy import String, Integer, Boolean, DateTime, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, utcnow



"""
사용자 권한(Role) 정의

- GUEST        : 가입 직후 상태 (이메일 인증 후 가입 신청 가능)
- MEMBER       : 가입 신청이 승인된 동아리 회원
- MENTOR       : 멘토
- MODERATOR    : 운영진
- ADMIN        : 관리자
- SUPER_ADMIN  : 최고 관리자 (seed 스크립트로만 생성)

"""

class Role(str, Enum):
    GUEST = "GUEST"
    MEMBER = "MEMBER"
    MENTOR = "MENTOR"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"



"""
사용자(User) 모델

- email 은 고유 식별자
- role을 통해 접근 권한 제어
- is_verified : OTP 이메일 인증 완료 여부
- is_active   : 관리자에 의해 비활성화된 계정은 로그인 불가
- is_deleted / deleted_at 으로 Soft Delete 지원
- refresh_token_version 으로 강제 로그아웃 및 토큰 무효화 지원

"""

class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    role: Mapped[Role] = mapped_column(SAEnum(Role, name="user_role"), nullable=False, default=Role.GUEST)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    deleted_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    refresh_token_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
