"""
services/notices.py

공지사항(Notice) 작성 / 공개 / 조회 로직.

- 공개 목록: published=True, is_deleted=False 만 노출
- 관리자 목록: 삭제되지 않은 전체 (published 필터 선택)
- title 부분 일치 검색 (대소문자 무시)
- 트랜잭션 제어(commit/rollback)는 라우터에서 수행

"""

import uuid

from sqlalchemy import select, func, asc, desc
from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFound
from app.db.base import utcnow
from app.models.notice import Notice
from app.schemas.notice import NoticeCreateRequest, NoticeUpdateRequest
from app.services.pagination import Pagination


NOTICE_SORTABLE = {
    "created_at": Notice.created_at,
    "published_at": Notice.published_at,
    "title": Notice.title,
}


def create_notice(db: Session, *, author_id: uuid.UUID, payload: NoticeCreateRequest) -> Notice:
    notice = Notice(title=payload.title, content=payload.content, created_by_id=author_id)
    db.add(notice)
    db.flush()
    return notice


def list_notices(
    db: Session,
    *,
    title: str | None,
    published: bool | None,
    pagination: Pagination,
) -> tuple[list[Notice], int]:
    conditions = [Notice.is_deleted.is_(False)]
    if title:
        conditions.append(Notice.title.icontains(title, autoescape=True))
    if published is not None:
        conditions.append(Notice.published.is_(published))

    column = NOTICE_SORTABLE[pagination.sort_by]
    order = desc(column) if pagination.sort_order == "desc" else asc(column)

    notices = db.scalars(
        select(Notice)
        .options(selectinload(Notice.created_by))
        .where(*conditions)
        .order_by(order)
        .offset(pagination.skip)
        .limit(pagination.limit)
    ).all()
    total = db.scalar(select(func.count()).select_from(Notice).where(*conditions)) or 0
    return list(notices), total


def get_notice(db: Session, notice_id: uuid.UUID) -> Notice:
    notice = db.scalar(select(Notice).where(Notice.id == notice_id, Notice.is_deleted.is_(False)))
    if not notice:
        raise NotFound("Notice not found")
    return notice


def update_notice(db: Session, notice_id: uuid.UUID, payload: NoticeUpdateRequest) -> Notice:
    notice = get_notice(db, notice_id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(notice, key, value)
    db.flush()
    return notice


def publish_notice(db: Session, notice_id: uuid.UUID) -> Notice:
    notice = get_notice(db, notice_id)
    notice.published = True
    notice.published_at = utcnow()
    db.flush()
    return notice


def soft_delete_notice(db: Session, notice_id: uuid.UUID) -> Notice:
    notice = get_notice(db, notice_id)
    notice.is_deleted = True
    db.flush()
    return notice
