"""
session.py

데이터베이스 엔진 및 세션(Session) 팩토리 관리 파일.

- build_engine()      : URL 에 맞는 Engine 생성 (운영 PostgreSQL / 로컬·테스트 SQLite)
- build_session_factory(): 요청 또는 트랜잭션 단위로 사용할 sessionmaker 생성
- engine / SessionLocal : 애플리케이션 기본 인스턴스

가입 신청 서비스(app.services.membership)는 SessionLocal 을 직접 import 하지 않고
app.core.deps.get_session_factory 를 통해 주입받는다.

관련 파일:
- app.core.config        : DATABASE_URL 설정
- app.core.deps          : get_db / get_session_factory 의존성

"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def build_engine(url: str) -> Engine:
    # SQLite 는 FastAPI 스레드풀에서 같은 커넥션을 공유할 수 있도록 설정
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})

    # pool_pre_ping=True:
    #   장시간 idle 후 끊어진 DB 커넥션을 자동으로 감지/재연결
    return create_engine(url, pool_pre_ping=True)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = build_session_factory(engine)
