import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.user import User, Role


class UserStore:
    """User 조회 / 권한 변경. 트랜잭션 제어는 호출 측에서 수행."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return self.db.scalar(select(User).where(User.id == user_id, User.is_deleted.is_(False)))

    def find_by_email(self, email: str) -> User | None:
        return self.db.scalar(select(User).where(User.email == email, User.is_deleted.is_(False)))

    def update_role(self, user: User, role: Role, **extra) -> User:
        user.role = role
        for key, value in extra.items():
            setattr(user, key, value)
        self.db.flush()
        return user
