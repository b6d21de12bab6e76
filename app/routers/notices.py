"""
notices.py

공지사항(Notice) API 모음.

주요 기능:
- 공지 작성 / 수정 / 공개 / 삭제 (ADMIN 이상)
- 공개 공지 목록 (누구나, published=True 만)
- 관리자 공지 목록 (삭제되지 않은 전체, published 필터)
- 공지 단건 조회

설계 원칙:
- 작성 직후에는 비공개(published=False), publish 호출 시 공개
- 삭제는 Soft Delete

"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.core.errors import DomainError
from app.models.user import User
from app.schemas.common import PageMeta
from app.schemas.notice import NoticeCreateRequest, NoticeUpdateRequest, NoticeResponse
from app.services.notices import (
    NOTICE_SORTABLE,
    create_notice,
    get_notice,
    list_notices,
    publish_notice,
    soft_delete_notice,
    update_notice,
)
from app.services.pagination import calculate_pagination

router = APIRouter(prefix="/notices", tags=["notices"])


def _page(db: Session, *, title, published, page, limit, sort_by, sort_order) -> dict:
    pagination = calculate_pagination(
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order, sortable=NOTICE_SORTABLE,
    )
    notices, total = list_notices(db, title=title, published=published, pagination=pagination)
    return {
        "message": "Notices retrieved successfully",
        "data": [NoticeResponse.model_validate(n).model_dump(mode="json") for n in notices],
        "meta": PageMeta(page=pagination.page, limit=pagination.limit, total=total).model_dump(),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    data: NoticeCreateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        notice = create_notice(db, author_id=current_admin.id, payload=data)
        db.commit()
        db.refresh(notice)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Notice created successfully",
        "data": NoticeResponse.model_validate(notice).model_dump(mode="json"),
    }


# 공개 목록: 공개된 공지만
@router.get("")
def list_published(
    title: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    db: Session = Depends(get_db),
):
    return _page(
        db, title=title, published=True,
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order,
    )


@router.get("/admin")
def list_for_admin(
    title: str | None = None,
    published: bool | None = None,
    page: int | None = None,
    limit: int | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return _page(
        db, title=title, published=published,
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order,
    )


@router.get("/{notice_id}")
def get_one(notice_id: uuid.UUID, db: Session = Depends(get_db)):
    notice = get_notice(db, notice_id)
    return {
        "message": "Notice retrieved successfully",
        "data": NoticeResponse.model_validate(notice).model_dump(mode="json"),
    }


@router.patch("/{notice_id}")
def update(
    notice_id: uuid.UUID,
    data: NoticeUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        notice = update_notice(db, notice_id, data)
        db.commit()
        db.refresh(notice)
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Notice updated successfully",
        "data": NoticeResponse.model_validate(notice).model_dump(mode="json"),
    }


@router.patch("/{notice_id}/publish")
def publish(
    notice_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        notice = publish_notice(db, notice_id)
        db.commit()
        db.refresh(notice)
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Notice published successfully",
        "data": NoticeResponse.model_validate(notice).model_dump(mode="json"),
    }


@router.delete("/{notice_id}")
def delete(
    notice_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        notice = soft_delete_notice(db, notice_id)
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Notice deleted successfully",
        "data": {"id": str(notice.id)},
    }
