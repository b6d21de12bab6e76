"""
transaction.py

여러 저장소(store) 작업을 하나의 트랜잭션으로 묶는 범위(scope) 헬퍼.

    with transaction(session_factory) as db:
        ... store(db) 호출 ...

- 블록이 정상 종료되면 commit, 예외가 발생하면 rollback
- DomainError(비즈니스 규칙 위반)는 그대로 전달
- IntegrityError 는 호출 측이 지정한 도메인 오류로 변환 (기본 StoreFailure)
- 그 외 SQLAlchemyError 는 StoreFailure 로 변환 (DB 내부 정보는 노출하지 않음)

"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DomainError, StoreFailure

logger = logging.getLogger(__name__)


@contextmanager
def transaction(
    session_factory: Callable[[], Session],
    *,
    integrity_error: type[DomainError] = StoreFailure,
) -> Iterator[Session]:
    with session_factory() as db:
        try:
            with db.begin():
                yield db
        except IntegrityError as e:
            logger.warning("Integrity error, transaction rolled back", extra={"error": type(e).__name__})
            raise integrity_error() from e
        except SQLAlchemyError as e:
            logger.exception("Transaction failed and was rolled back")
            raise StoreFailure() from e
