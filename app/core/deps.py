from functools import lru_cache
from typing import Callable, Generator
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from redis import Redis
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.core.config import settings
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.models.user import User, Role
from app.services.mailer import Mailer
from app.services.membership import MembershipService
from app.services.otp import OtpService

# Swagger Authorize에서 "Bearer 토큰" 입력받는 스키마
bearer_scheme = HTTPBearer(auto_error=False)


# 테스트에서는 이 의존성만 override 하면 get_db / 서비스가 모두 테스트 DB를 사용
def get_session_factory() -> Callable[[], Session]:
    return SessionLocal


def get_db(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if cred is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = uuid.UUID(decode_access_token(cred.credentials))
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.scalar(select(User).where(User.id == user_id, User.is_deleted.is_(False)))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    return user

# MENTOR / MODERATOR 는 같은 단계
ROLE_LEVEL = {
    Role.GUEST: 0,
    Role.MEMBER: 1,
    Role.MENTOR: 2,
    Role.MODERATOR: 2,
    Role.ADMIN: 3,
    Role.SUPER_ADMIN: 4,
}

def require_min_role(min_role: Role):
    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if ROLE_LEVEL[current_user.role] < ROLE_LEVEL[min_role]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role >= {min_role.value}",
            )
        return current_user
    return _checker

get_current_member = require_min_role(Role.MEMBER)
get_current_admin = require_min_role(Role.ADMIN)
get_current_superadmin = require_min_role(Role.SUPER_ADMIN)


@lru_cache
def get_redis() -> Redis:
    return Redis.from_url(settings.REDIS_URL, decode_responses=True)


def get_mailer() -> Mailer:
    return Mailer(settings)


def get_otp_service(
    redis: Redis = Depends(get_redis),
    mailer: Mailer = Depends(get_mailer),
) -> OtpService:
    return OtpService(
        redis,
        mailer,
        length=settings.OTP_LENGTH,
        expire_seconds=settings.OTP_EXPIRE_SECONDS,
        max_attempts=settings.OTP_MAX_ATTEMPTS,
    )


def get_membership_service(
    session_factory: Callable[[], Session] = Depends(get_session_factory),
) -> MembershipService:
    return MembershipService(session_factory)
