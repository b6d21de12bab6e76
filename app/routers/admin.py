"""
admin.py

관리자 활동 로그(Audit Log) 조회 API.

가입 신청 승인 / 거절, 역할 기반 계정 생성, 사용자 삭제 등
관리자 행위는 각 기능의 트랜잭션 안에서 admin_action_logs 에 기록되며,
이 파일은 그 기록을 최신순으로 조회하는 기능만 담당한다.

"""

from fastapi import APIRouter, Depends, Query

from sqlalchemy.orm import Session, aliased
from sqlalchemy import select, desc

from app.core.deps import get_db, get_current_admin
from app.models.user import User
from app.models.admin_log import AdminActionLog


router = APIRouter(prefix="/admin", tags=["admin"])


def _user_summary(user: User | None) -> dict | None:
    if user is None:
        return None
    return {
        "id": str(user.id),
        "email": user.email,
        "name": user.full_name,
        "role": user.role.value,
    }


# 관리자 활동 로그 조회 엔드포인트 (최신순, 최대 200건)
@router.get("/logs")
def list_admin_logs(
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    Actor = aliased(User)
    Target = aliased(User)

    rows = db.execute(
        select(AdminActionLog, Actor, Target)
        .join(Actor, Actor.id == AdminActionLog.actor_id)
        .outerjoin(Target, Target.id == AdminActionLog.target_user_id)
        .order_by(desc(AdminActionLog.created_at))
        .limit(limit)
    ).all()

    result = [
        {
            "id": str(log.id),
            "created_at": log.created_at.isoformat(),
            "action": log.action.value,
            "before_role": log.before_role,
            "after_role": log.after_role,
            "note": log.note,
            "actor": _user_summary(actor),
            "target": _user_summary(target),
        }
        for log, actor, target in rows
    ]
    return {
        "message": "Admin logs retrieved successfully",
        "data": result,
        "meta": {
            "limit": limit,
            "count": len(result),
        },
    }
