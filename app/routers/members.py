"""
members.py

동아리 가입 신청(Membership Application) API 모음.

GUEST 사용자는 이메일 인증 후 가입 신청서를 제출하고,
관리자는 신청서를 검색 / 승인 / 거절한다.
승인 시 사용자는 MEMBER 로 승격되고 Member 레코드가 생성된다.

주요 기능:
- 신청서 제출 / 재제출 (GUEST)
- 내 신청서 조회
- 신청서 목록 조회 (ADMIN 이상, 검색 + 필터 + 페이지네이션)
- 신청서 승인 / 거절 (ADMIN 이상)

설계 원칙:
- 라우터는 입력 검증과 응답 포장만 수행
- 상태 전이 / 트랜잭션 / 오류 판단은 MembershipService 에 위임
- 도메인 오류는 main.py 의 핸들러가 HTTP 응답으로 변환

관련 파일:
- app.services.membership  : 신청서 생명주기 서비스
- app.schemas.membership   : 요청 / 응답 스키마

"""

import uuid

from fastapi import APIRouter, Depends, Query, status

from app.core.deps import get_current_user, get_current_admin, get_membership_service
from app.models.membership import ApplicationStatus
from app.models.user import User
from app.schemas.membership import (
    ApplicationFilter,
    ApplicationRejectRequest,
    ApplicationSubmitRequest,
)
from app.services.membership import MembershipService
from app.services.pagination import calculate_pagination
from app.stores.applications import SORTABLE_FIELDS

router = APIRouter(prefix="/members", tags=["members"])


# 가입 신청서 제출 (거절된 신청서가 있으면 같은 신청서를 재제출)
@router.post("/applications", status_code=status.HTTP_201_CREATED)
def submit_application(
    data: ApplicationSubmitRequest,
    current_user: User = Depends(get_current_user),
    service: MembershipService = Depends(get_membership_service),
):
    application = service.submit_application(current_user.id, data)
    return {
        "message": "Application submitted successfully",
        "data": application.model_dump(mode="json"),
    }


# 내 신청서 조회
@router.get("/applications/me")
def get_my_application(
    current_user: User = Depends(get_current_user),
    service: MembershipService = Depends(get_membership_service),
):
    application = service.get_my_application(current_user.id)
    return {
        "message": "Application retrieved successfully",
        "data": application.model_dump(mode="json"),
    }


"""
가입 신청서 목록 조회 (관리자)

- search_term : 학번 / 이름 / 이메일 부분 일치 (대소문자 무시)
- status, department_id, session_id, learning_track_id : 정확히 일치
- page, limit, sort_by, sort_order : 페이지네이션 / 정렬

"""

@router.get("/applications")
def list_applications(
    search_term: str | None = None,
    application_status: ApplicationStatus | None = Query(default=None, alias="status"),
    department_id: uuid.UUID | None = None,
    session_id: uuid.UUID | None = None,
    learning_track_id: uuid.UUID | None = None,
    page: int | None = Query(default=None, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort_by: str | None = None,
    sort_order: str | None = None,
    current_admin: User = Depends(get_current_admin),
    service: MembershipService = Depends(get_membership_service),
):
    filters = ApplicationFilter(
        search_term=search_term,
        status=application_status,
        department_id=department_id,
        session_id=session_id,
        learning_track_id=learning_track_id,
    )
    pagination = calculate_pagination(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        sortable=SORTABLE_FIELDS,
    )
    result = service.list_applications(filters, pagination)
    return {
        "message": "Applications retrieved successfully",
        "data": [a.model_dump(mode="json") for a in result.data],
        "meta": result.meta.model_dump(),
    }


# 가입 신청서 승인 → 사용자 MEMBER 승격 + Member 생성
@router.patch("/applications/{application_id}/approve")
def approve_application(
    application_id: uuid.UUID,
    current_admin: User = Depends(get_current_admin),
    service: MembershipService = Depends(get_membership_service),
):
    application = service.approve_application(application_id, reviewer_id=current_admin.id)
    return {
        "message": "Application approved successfully",
        "data": application.model_dump(mode="json"),
    }


# 가입 신청서 거절 (거절 사유 필수)
@router.patch("/applications/{application_id}/reject")
def reject_application(
    application_id: uuid.UUID,
    data: ApplicationRejectRequest,
    current_admin: User = Depends(get_current_admin),
    service: MembershipService = Depends(get_membership_service),
):
    application = service.reject_application(
        application_id,
        data.review_comment,
        reviewer_id=current_admin.id,
    )
    return {
        "message": "Application rejected successfully",
        "data": application.model_dump(mode="json"),
    }
