"""
users.py

사용자 정보 조회 / 관리 API 모음.

주요 기능:
- 본인 정보 + 역할별 프로필 조회 (로그인 사용자 전체)
- 사용자 목록 조회 (ADMIN 이상, 검색 + 필터 + 페이지네이션)
- 역할 기반 계정 생성 (ADMIN / MENTOR / MODERATOR / MEMBER + 프로필)
- 사용자 Soft Delete

설계 원칙:
- 비밀번호 해시 등 민감 정보는 응답에서 제외 (UserResponse)
- Soft Delete(is_deleted=True)된 사용자는 기본적으로 제외
- 관리자 행위는 admin_action_logs 에 같은 트랜잭션으로 기록

관련 파일:
- app.services.users       : 프로필 조회 / 계정 생성 / 삭제 로직
- app.core.deps            : 권한 인증(get_current_user, get_current_admin)
"""

import uuid
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session
from starlette import status

from app.core.deps import get_current_user, get_current_admin, get_db
from app.core.errors import DomainError
from app.models.admin_log import AdminAction
from app.models.user import User, Role
from app.schemas.common import PageMeta
from app.schemas.user import MeResponse, UserResponse, RoleBasedUserCreate
from app.services.admin_log import write_admin_log
from app.services.pagination import calculate_pagination
from app.services.users import (
    USER_SORTABLE,
    create_role_based_user,
    list_users,
    load_profile,
    soft_delete_user,
)

router = APIRouter(prefix="/users", tags=["users"])

"""
본인 정보 조회 API

- 로그인한 사용자 본인의 기본 정보 반환
- role 에 맞는 프로필(관리자 / 멘토 / 모더레이터 / 회원)을 함께 반환
- GUEST 는 profile=None

"""
@router.get("/me")
def me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = MeResponse.model_validate(current_user)
    data.profile = load_profile(db, current_user)
    return {
        "message": "User retrieved successfully",
        "data": data.model_dump(mode="json"),
    }

"""
사용자 목록 조회 API (관리자)

- search_term : 이름 / 이메일 부분 일치
- role, is_active, is_verified : 정확히 일치
- 삭제된 사용자 제외

"""
@router.get("")
def list_all_users(
    search_term: str | None = None,
    role: Role | None = None,
    is_active: bool | None = None,
    is_verified: bool | None = None,
    page: int | None = None,
    limit: int | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    pagination = calculate_pagination(
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order, sortable=USER_SORTABLE,
    )
    users, total = list_users(
        db,
        search_term=search_term,
        role=role,
        is_active=is_active,
        is_verified=is_verified,
        pagination=pagination,
    )
    return {
        "message": "Users retrieved successfully",
        "data": [UserResponse.model_validate(u).model_dump(mode="json") for u in users],
        "meta": PageMeta(page=pagination.page, limit=pagination.limit, total=total).model_dump(),
    }

"""
역할 기반 계정 생성 API (관리자)

- role 값(ADMIN / MENTOR / MODERATOR / MEMBER)에 따라 profile 형식이 결정됨
- 생성된 계정은 이메일 인증 완료 상태
- ADMIN 계정은 SUPER_ADMIN 만 생성 가능

"""
@router.post("/role-based", status_code=status.HTTP_201_CREATED)
def create_user_with_role(
    data: RoleBasedUserCreate = Body(...),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    if data.role == Role.ADMIN.value and current_admin.role != Role.SUPER_ADMIN:
        raise HTTPException(status_code=403, detail="Only SUPER_ADMIN can create ADMIN users")

    try:
        user = create_role_based_user(db, data)
        write_admin_log(
            db,
            actor_id=current_admin.id,
            action=AdminAction.CREATE_USER,
            target_user_id=user.id,
            after_role=user.role.value,
        )
        db.commit()
        db.refresh(user)
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    result = MeResponse.model_validate(user)
    result.profile = load_profile(db, user)
    return {
        "message": f"{user.role.value} user created successfully",
        "data": result.model_dump(mode="json"),
    }

"""
사용자 Soft Delete API (관리자)

- 자기 자신 / SUPER_ADMIN 삭제 불가
- is_deleted=True, is_active=False, refresh token 무효화

"""
@router.patch("/{user_id}/soft-delete")
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        user = soft_delete_user(db, user_id=user_id, actor=current_admin)
        write_admin_log(
            db,
            actor_id=current_admin.id,
            action=AdminAction.DELETE_USER,
            target_user_id=user.id,
            before_role=user.role.value,
        )
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "User deleted successfully",
        "data": {"id": str(user.id), "email": user.email, "is_deleted": True},
    }
