"""
services/admin_log.py

관리자 행위 로그 기록 서비스.

이 파일은 관리자(Admin)가 수행한 주요 행위를
AdminActionLog 테이블에 기록하는 역할을 담당한다.

가입 신청 승인/거절, 역할 기반 계정 생성, 사용자 삭제 시 호출되며,
실제 데이터 변경과 같은 세션(트랜잭션)에 추가되므로
변경이 롤백되면 로그도 함께 롤백된다.

NOTE:
- db.commit()은 호출 측(라우터/서비스)에서 수행

"""

import logging
import uuid

from sqlalchemy.orm import Session
from app.models.admin_log import AdminActionLog, AdminAction

logger = logging.getLogger(__name__)

NOTE_MAX_LENGTH = 500


def write_admin_log(
    db: Session,
    *,
    actor_id: uuid.UUID,
    action: AdminAction,
    target_user_id: uuid.UUID | None = None,
    before_role: str | None = None,
    after_role: str | None = None,
    note: str | None = None,
) -> AdminActionLog:
    log = AdminActionLog(
        actor_id=actor_id,
        action=action,
        target_user_id=target_user_id,
        before_role=before_role,
        after_role=after_role,
        note=note[:NOTE_MAX_LENGTH] if note else None,
    )
    db.add(log)
    logger.info(
        "Admin action recorded",
        extra={"action": action.value, "actor_id": str(actor_id), "target_user_id": str(target_user_id)},
    )
    return log
