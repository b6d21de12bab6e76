"""
membership.py

동아리 가입 신청서(MembershipApplication) 및 회원(Member) 모델.

가입 신청서 상태 흐름:

    (없음) --신청--> PENDING --승인--> APPROVED (종료)
                     PENDING --거절--> REJECTED
                     REJECTED --재신청--> PENDING  (같은 row 갱신)

설계 원칙:
- 사용자당 신청서는 최대 1개 (user_id UNIQUE), 재신청은 기존 row 를 갱신
- Member 레코드는 승인 시점에만 생성되며 사용자당 1개 (user_id UNIQUE)
- 상태 전이 규칙은 app.services.membership 에서만 관리

"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, utcnow


class ApplicationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class MembershipApplication(Base):
    __tablename__ = "membership_applications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), unique=True, nullable=False)

    student_id: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    department_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("departments.id"), nullable=False)
    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("sessions.id"), nullable=False)
    learning_track_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("learning_tracks.id"), nullable=True
    )

    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    profile_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    motivation: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(ApplicationStatus, name="application_status"),
        default=ApplicationStatus.PENDING,
        nullable=False,
        index=True,
    )
    review_comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    user = relationship("User")


class Member(Base):
    """승인된 가입 신청서로부터 생성되는 회원 프로필."""

    __tablename__ = "members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), unique=True, nullable=False)

    student_id: Mapped[str] = mapped_column(String(30), nullable=False)
    department_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("departments.id"), nullable=False)
    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("sessions.id"), nullable=False)
    learning_track_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("learning_tracks.id"), nullable=True
    )
    profile_image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
