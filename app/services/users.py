"""
services/users.py

사용자 조회 / 역할별 프로필 / 역할 기반 계정 생성 로직.

주요 기능:
- load_profile           : 사용자 role 에 맞는 프로필 레코드 반환
- create_role_based_user : 관리자가 ADMIN / MENTOR / MODERATOR / MEMBER 계정을 프로필과 함께 생성
- list_users             : 관리자용 검색 + 필터 + 페이지네이션
- soft_delete_user       : 사용자 Soft Delete

설계 원칙:
- role → 프로필 테이블 매핑은 match 문 한 곳에서만 처리
- 트랜잭션 제어(commit/rollback)는 라우터에서 수행

"""

import uuid

from sqlalchemy import select, func, or_, asc, desc
from sqlalchemy.orm import Session

from app.core.errors import Conflict, Forbidden, NotFound
from app.core.security import get_password_hash
from app.db.base import utcnow
from app.models.membership import Member
from app.models.profile import AdminProfile, MentorProfile, ModeratorProfile
from app.models.user import User, Role
from app.schemas.user import (
    CreateAdminRequest,
    CreateMemberRequest,
    CreateMentorRequest,
    CreateModeratorRequest,
)
from app.services.catalog import get_department, get_session, require_active_learning_track
from app.services.pagination import Pagination
from app.services.otp import normalize_email


USER_SORTABLE = {
    "created_at": User.created_at,
    "email": User.email,
    "first_name": User.first_name,
}


def _profile_dict(profile) -> dict | None:
    if profile is None:
        return None
    return {c.key: getattr(profile, c.key) for c in profile.__table__.columns}


"""
사용자 role 에 해당하는 프로필 조회

- ADMIN     → admin_profiles
- MENTOR    → mentor_profiles
- MODERATOR → moderator_profiles
- MEMBER    → members (가입 승인 시 생성)
- GUEST / SUPER_ADMIN → 프로필 없음

"""

def load_profile(db: Session, user: User) -> dict | None:
    match user.role:
        case Role.ADMIN:
            model = AdminProfile
        case Role.MENTOR:
            model = MentorProfile
        case Role.MODERATOR:
            model = ModeratorProfile
        case Role.MEMBER:
            model = Member
        case Role.GUEST | Role.SUPER_ADMIN:
            return None

    return _profile_dict(db.scalar(select(model).where(model.user_id == user.id)))


def create_role_based_user(
    db: Session,
    payload: CreateAdminRequest | CreateMentorRequest | CreateModeratorRequest | CreateMemberRequest,
) -> User:
    email = normalize_email(payload.email)
    if db.scalar(select(User).where(User.email == email)):
        raise Conflict("Email already registered")

    user = User(
        email=email,
        password_hash=get_password_hash(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        role=Role(payload.role),
        is_active=True,
        is_verified=True,
    )
    db.add(user)
    db.flush()

    profile = payload.profile
    match payload:
        case CreateAdminRequest():
            db.add(AdminProfile(user_id=user.id, **profile.model_dump()))
        case CreateMentorRequest():
            if profile.learning_track_id:
                require_active_learning_track(db, profile.learning_track_id)
            db.add(MentorProfile(user_id=user.id, **profile.model_dump()))
        case CreateModeratorRequest():
            db.add(ModeratorProfile(user_id=user.id, **profile.model_dump()))
        case CreateMemberRequest():
            get_department(db, profile.department_id)
            get_session(db, profile.session_id)
            if profile.learning_track_id:
                require_active_learning_track(db, profile.learning_track_id)
            db.add(Member(user_id=user.id, **profile.model_dump()))

    db.flush()
    return user


def list_users(
    db: Session,
    *,
    search_term: str | None,
    role: Role | None,
    is_active: bool | None,
    is_verified: bool | None,
    pagination: Pagination,
) -> tuple[list[User], int]:
    conditions = [User.is_deleted.is_(False)]
    if search_term:
        conditions.append(
            or_(
                User.first_name.icontains(search_term, autoescape=True),
                User.last_name.icontains(search_term, autoescape=True),
                User.email.icontains(search_term, autoescape=True),
            )
        )
    if role is not None:
        conditions.append(User.role == role)
    if is_active is not None:
        conditions.append(User.is_active.is_(is_active))
    if is_verified is not None:
        conditions.append(User.is_verified.is_(is_verified))

    column = USER_SORTABLE[pagination.sort_by]
    order = desc(column) if pagination.sort_order == "desc" else asc(column)

    users = db.scalars(
        select(User).where(*conditions).order_by(order).offset(pagination.skip).limit(pagination.limit)
    ).all()
    total = db.scalar(select(func.count()).select_from(User).where(*conditions)) or 0
    return list(users), total


def soft_delete_user(db: Session, *, user_id: uuid.UUID, actor: User) -> User:
    user = db.scalar(select(User).where(User.id == user_id, User.is_deleted.is_(False)))
    if not user:
        raise NotFound("User not found")

    # 자기 자신 / SUPER_ADMIN 삭제 금지
    if user.id == actor.id:
        raise Forbidden("Cannot delete yourself")
    if user.role == Role.SUPER_ADMIN:
        raise Forbidden("Cannot delete SUPER_ADMIN user")

    user.is_deleted = True
    user.is_active = False
    user.deleted_at = utcnow()
    user.refresh_token_version += 1
    return user
