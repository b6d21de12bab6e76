import os

# 설정 객체가 import 시점에 만들어지므로 앱 import 전에 기본값 지정
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_app.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-secret-key")

import pytest
from fastapi.testclient import TestClient

from app.main import app as fastapi_app
from app.core.config import settings
from app.core.deps import get_session_factory, get_redis, get_mailer
from app.db.base import Base
from app.db.session import build_engine, build_session_factory
from app.services.membership import MembershipService

# ✅ 모델 import (Base.metadata에 테이블 등록)
import app.models  # noqa: F401

from tests.helpers import FakeMailer, FakeRedis


# TEST_DATABASE_URL 이 없으면 로컬 SQLite 파일 사용
TEST_DB_URL = settings.TEST_DATABASE_URL or os.getenv("TEST_DATABASE_URL") or "sqlite:///./test_club.db"

engine = build_engine(TEST_DB_URL)
TestingSessionLocal = build_session_factory(engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """테스트 전체 시작/종료 때만 스키마 생성/삭제"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables():
    """각 테스트마다 데이터 초기화 (테이블은 유지, row만 삭제)"""
    yield
    # FK 의존성 역순으로 삭제
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db_session():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def fake_redis():
    return FakeRedis()


@pytest.fixture()
def mailer():
    return FakeMailer()


@pytest.fixture()
def session_factory():
    return TestingSessionLocal


@pytest.fixture()
def service(session_factory):
    return MembershipService(session_factory)


@pytest.fixture()
def client(fake_redis, mailer):
    fastapi_app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    fastapi_app.dependency_overrides[get_redis] = lambda: fake_redis
    fastapi_app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()
