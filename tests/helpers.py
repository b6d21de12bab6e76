# tests/helpers.py
import uuid
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.models.catalog import Department, AcademicSession, LearningTrack
from app.models.user import User, Role
from app.core.security import get_password_hash


DEFAULT_PASSWORD = "Passw0rd!123"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_user_in_db(
    db: Session,
    *,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    role: Role = Role.GUEST,
    is_verified: bool = True,
    is_active: bool = True,
    first_name: str = "Test",
    last_name: str = "User",
) -> User:
    user = User(
        email=email or f"user_{uuid.uuid4().hex[:8]}@test.com",
        password_hash=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        is_verified=is_verified,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_admin_in_db(db: Session, *, email: str | None = None, password: str = DEFAULT_PASSWORD,
                       role: Role = Role.ADMIN) -> User:
    return create_user_in_db(
        db,
        email=email or f"admin_{uuid.uuid4().hex[:8]}@test.com",
        password=password,
        role=role,
        first_name="Admin",
        last_name="User",
    )


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> str:
    res = client.post("/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["data"]["access_token"]


def seed_catalog(db: Session) -> dict:
    """신청서 제출에 필요한 학과 / 세션 / 학습 트랙 생성"""
    department = Department(name=f"CSE-{uuid.uuid4().hex[:6]}")
    session = AcademicSession(name="24-25")
    track = LearningTrack(name="Web Development", slug=f"web-{uuid.uuid4().hex[:6]}")
    db.add_all([department, session, track])
    db.commit()
    return {
        "department_id": department.id,
        "session_id": session.id,
        "learning_track_id": track.id,
    }


def application_payload(catalog: dict, **overrides) -> dict:
    payload = {
        "student_id": f"2024-{uuid.uuid4().hex[:4]}",
        "department_id": str(catalog["department_id"]),
        "session_id": str(catalog["session_id"]),
        "learning_track_id": str(catalog["learning_track_id"]),
        "phone_number": "010-1234-5678",
        "motivation": "I want to build things with friends.",
    }
    payload.update(overrides)
    return payload


def get_user(db: Session, user_id) -> User:
    db.expire_all()
    if isinstance(user_id, str):
        user_id = uuid.UUID(user_id)
    return db.scalar(select(User).where(User.id == user_id))


class FakeRedis:
    """OtpService 가 사용하는 명령만 구현한 메모리 저장소 (TTL 은 기록만 함)"""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttl: dict[str, int] = {}

    def exists(self, key: str) -> int:
        return int(key in self.store)

    def set(self, key: str, value, ex: int | None = None):
        self.store[key] = str(value)
        if ex is not None:
            self.ttl[key] = ex
        return True

    def get(self, key: str):
        return self.store.get(key)

    def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttl.pop(key, None)
        return removed

    def incr(self, key: str) -> int:
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    def expire(self, key: str, seconds: int) -> bool:
        if key not in self.store:
            return False
        self.ttl[key] = seconds
        return True


class FakeMailer:
    """발송된 OTP 를 기록만 하는 메일러"""

    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    def send_otp(self, *, to: str, name: str, otp: str, expire_seconds: int) -> None:
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append({"to": to, "name": name, "otp": otp, "expire_seconds": expire_seconds})

    def last_otp(self, to: str) -> str:
        return [m["otp"] for m in self.sent if m["to"] == to][-1]
