"""
sessions.py

학사 세션(AcademicSession, 예: 24-25) API 모음.

- 목록은 공개 (가입 신청 화면)
- 생성 / 삭제는 관리자 전용, 이름은 'YY-YY' 형식

"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.core.errors import DomainError
from app.models.user import User
from app.schemas.catalog import SessionCreateRequest, SessionResponse
from app.services.catalog import create_session, list_sessions, soft_delete_session

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    data: SessionCreateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        session = create_session(db, name=data.name)
        db.commit()
        db.refresh(session)
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Session created successfully",
        "data": SessionResponse.model_validate(session).model_dump(mode="json"),
    }


@router.get("")
def list_all(db: Session = Depends(get_db)):
    sessions = list_sessions(db)
    return {
        "message": "Sessions retrieved successfully",
        "data": [SessionResponse.model_validate(s).model_dump(mode="json") for s in sessions],
    }


@router.delete("/{session_id}")
def delete(
    session_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        session = soft_delete_session(db, session_id)
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Session deleted successfully",
        "data": {"id": str(session.id)},
    }
