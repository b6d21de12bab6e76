"""
learning_tracks.py

학습 트랙(LearningTrack) API 모음.

- 생성은 관리자 전용, slug 는 이름에서 자동 생성
- 목록 / 단건 조회는 공개 (id 또는 slug 로 조회)
- 수정 / Soft Delete 는 관리자 전용, 삭제된 트랙은 조회되지 않음

"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.core.errors import DomainError
from app.models.user import User
from app.schemas.catalog import (
    LearningTrackCreateRequest,
    LearningTrackResponse,
    LearningTrackUpdateRequest,
)
from app.schemas.common import PageMeta
from app.services.catalog import (
    LEARNING_TRACK_SORTABLE,
    create_learning_track,
    get_learning_track,
    list_learning_tracks,
    soft_delete_learning_track,
    update_learning_track,
)
from app.services.pagination import calculate_pagination

router = APIRouter(prefix="/learning-tracks", tags=["learning-tracks"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    data: LearningTrackCreateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        track = create_learning_track(db, data)
        db.commit()
        db.refresh(track)
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Learning track created successfully",
        "data": LearningTrackResponse.model_validate(track).model_dump(mode="json"),
    }


@router.get("")
def list_all(
    search_term: str | None = None,
    is_active: bool | None = None,
    page: int | None = None,
    limit: int | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    db: Session = Depends(get_db),
):
    pagination = calculate_pagination(
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order,
        sortable=LEARNING_TRACK_SORTABLE,
    )
    tracks, total = list_learning_tracks(
        db, search_term=search_term, is_active=is_active, pagination=pagination,
    )
    return {
        "message": "Learning tracks retrieved successfully",
        "data": [LearningTrackResponse.model_validate(t).model_dump(mode="json") for t in tracks],
        "meta": PageMeta(page=pagination.page, limit=pagination.limit, total=total).model_dump(),
    }


@router.get("/{id_or_slug}")
def get_one(id_or_slug: str, db: Session = Depends(get_db)):
    track = get_learning_track(db, id_or_slug)
    return {
        "message": "Learning track retrieved successfully",
        "data": LearningTrackResponse.model_validate(track).model_dump(mode="json"),
    }


@router.patch("/{track_id}")
def update(
    track_id: uuid.UUID,
    data: LearningTrackUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        track = update_learning_track(db, track_id, data)
        db.commit()
        db.refresh(track)
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Learning track updated successfully",
        "data": LearningTrackResponse.model_validate(track).model_dump(mode="json"),
    }


@router.patch("/{track_id}/soft-delete")
def soft_delete(
    track_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        track = soft_delete_learning_track(db, track_id)
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Learning track deleted successfully",
        "data": {"id": str(track.id)},
    }
