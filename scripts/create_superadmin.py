"""

SUPER_ADMIN 초기 계정 생성 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- .env에 정의된 SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD 를 읽어
  SUPER_ADMIN 계정을 생성한다.
- 이미 SUPER_ADMIN 계정이 존재하면 생성하지 않고 종료한다.

사용 목적:
- 가입 신청 심사 / 역할 기반 계정 생성 API에 접근할 수 있는
  최상위 관리자 계정을 안전하게 초기화하기 위함

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_superadmin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from app.core.config import settings
from app.db.session import SessionLocal
from app.models.user import User, Role
from app.core.security import get_password_hash
from app.services.otp import normalize_email


def main():
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        raise RuntimeError("SUPER_ADMIN_EMAIL and SUPER_ADMIN_PASSWORD must be set")

    db = SessionLocal()
    try:
        exists = db.scalar(
            select(User).where(User.role == Role.SUPER_ADMIN, User.is_deleted.is_(False))
        )
        if exists:
            print("✅ SUPER_ADMIN already exists. Skip creation.")
            return

        email = normalize_email(settings.SUPER_ADMIN_EMAIL)
        first_name = os.environ.get("SUPER_ADMIN_FIRST_NAME", "Super")
        last_name = os.environ.get("SUPER_ADMIN_LAST_NAME", "Admin")

        email_exists = db.scalar(
            select(User).where(User.email == email)
        )
        if email_exists:
            raise RuntimeError("Email already exists but is not SUPER_ADMIN")

        user = User(
            email=email,
            password_hash=get_password_hash(settings.SUPER_ADMIN_PASSWORD),
            first_name=first_name,
            last_name=last_name,
            role=Role.SUPER_ADMIN,
            is_active=True,
            is_verified=True,
        )

        db.add(user)
        db.commit()

        print(f"🚀 SUPER_ADMIN created: {email}")

    finally:
        db.close()


if __name__ == "__main__":
    main()
