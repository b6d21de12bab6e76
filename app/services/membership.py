"""
services/membership.py

동아리 가입 신청서(MembershipApplication) 생명주기 서비스.

상태 전이:

    (없음) --submit--> PENDING --approve--> APPROVED (종료)
                       PENDING --reject--> REJECTED
                       REJECTED --submit--> PENDING   (같은 row 재사용)

주요 기능:
- submit_application  : 최초 신청 / 거절된 신청서 재제출
- list_applications   : 관리자용 검색 + 필터 + 페이지네이션
- approve_application : 회원 승격 + Member 생성 + 상태 변경 (단일 트랜잭션)
- reject_application  : 거절 사유(필수) 기록
- get_my_application  : 본인 신청서 조회

설계 원칙:
- HTTP / FastAPI 의존성 없음, 규칙 위반은 app.core.errors 의 도메인 오류로 표현
- DB 세션 팩토리와 저장소(store) 클래스를 생성자로 주입받음
- 모든 연산은 자체 트랜잭션 안에서 수행되며 부분 커밋 없음
- 승인 시 신청서 행을 잠근 상태(FOR UPDATE)에서 다시 읽어 동시 승인 방지
- 반환 값은 트랜잭션 안에서 만든 응답 스키마 (세션 종료 후에도 안전)

관련 파일:
- app.stores.*             : User / Application / Member 저장소
- app.db.transaction       : 트랜잭션 범위 헬퍼
- app.routers.members      : 가입 신청 API

"""

import logging
import uuid
from typing import Callable

from sqlalchemy.orm import Session

from app.core.errors import (
    AlreadyApproved,
    AlreadyPending,
    AlreadyReviewed,
    DuplicateMember,
    Forbidden,
    NotFound,
    ValidationError,
)
from app.db.base import utcnow
from app.db.transaction import transaction
from app.models.admin_log import AdminAction
from app.models.membership import ApplicationStatus
from app.models.user import Role
from app.schemas.common import PageMeta
from app.schemas.membership import (
    ApplicationFilter,
    ApplicationPage,
    ApplicationResponse,
    ApplicationSubmitRequest,
)
from app.services.admin_log import write_admin_log
from app.services.catalog import get_department, get_session, require_active_learning_track
from app.services.pagination import Pagination
from app.stores.applications import ApplicationStore
from app.stores.members import MemberStore
from app.stores.users import UserStore

logger = logging.getLogger(__name__)


class MembershipService:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        user_store: type[UserStore] = UserStore,
        application_store: type[ApplicationStore] = ApplicationStore,
        member_store: type[MemberStore] = MemberStore,
    ):
        self.session_factory = session_factory
        self.user_store = user_store
        self.application_store = application_store
        self.member_store = member_store

    """
    가입 신청서 제출

    - 사용자는 존재하고 이메일 인증(is_verified)이 완료되어 있어야 함
    - 학과 / 세션 / 학습 트랙은 존재하고 삭제되지 않은 항목이어야 함
    - 기존 신청서 상태에 따라:
        없음      → 새 신청서 생성 (PENDING)
        PENDING   → AlreadyPending
        APPROVED  → AlreadyApproved
        REJECTED  → 같은 row 를 덮어쓰고 심사 정보 초기화 후 PENDING
    - 제출 시점에는 사용자 권한을 변경하지 않음

    """

    def submit_application(self, user_id: uuid.UUID, payload: ApplicationSubmitRequest) -> ApplicationResponse:
        # 동시 최초 제출로 user_id UNIQUE 가 충돌하면 이미 대기 중인 신청서가 있는 것
        with transaction(self.session_factory, integrity_error=AlreadyPending) as db:
            users = self.user_store(db)
            applications = self.application_store(db)

            user = users.find_by_id(user_id)
            if not user:
                raise NotFound("User not found")
            if not user.is_verified:
                raise ValidationError("Please verify your email before applying")

            existing = applications.find_by_user_id(user_id)
            if existing and existing.status == ApplicationStatus.PENDING:
                raise AlreadyPending()
            if existing and existing.status == ApplicationStatus.APPROVED:
                raise AlreadyApproved()

            if user.role != Role.GUEST:
                raise Forbidden("Only guests can apply for membership")

            self._ensure_references(db, payload)

            fields = {
                "student_id": payload.student_id.strip(),
                "department_id": payload.department_id,
                "session_id": payload.session_id,
                "learning_track_id": payload.learning_track_id,
                "phone_number": payload.phone_number,
                "profile_image": payload.profile_image,
                "motivation": payload.motivation,
            }

            if existing:
                application = applications.update(
                    existing,
                    **fields,
                    status=ApplicationStatus.PENDING,
                    review_comment=None,
                    reviewed_at=None,
                )
                logger.info("Application resubmitted", extra={"application_id": str(application.id)})
            else:
                application = applications.create(user_id=user_id, status=ApplicationStatus.PENDING, **fields)
                logger.info("Application submitted", extra={"application_id": str(application.id)})

            return ApplicationResponse.model_validate(application)

    def get_my_application(self, user_id: uuid.UUID) -> ApplicationResponse:
        with transaction(self.session_factory) as db:
            application = self.application_store(db).find_by_user_id(user_id)
            if not application:
                raise NotFound("Application not found")
            return ApplicationResponse.model_validate(application)

    def list_applications(self, filters: ApplicationFilter, pagination: Pagination) -> ApplicationPage:
        with transaction(self.session_factory) as db:
            applications = self.application_store(db)
            rows = applications.list(filters, pagination)
            total = applications.count(filters)
            return ApplicationPage(
                data=[ApplicationResponse.model_validate(a) for a in rows],
                meta=PageMeta(page=pagination.page, limit=pagination.limit, total=total),
            )

    """
    가입 신청서 승인 (단일 트랜잭션)

    사전 조건 (잠긴 신청서 행 기준으로 검사):
    1. 신청서 존재             → 아니면 NotFound
    2. 상태가 PENDING          → 아니면 AlreadyReviewed
    3. 해당 사용자의 Member 없음 → 아니면 DuplicateMember

    처리 순서:
    1. User.role = MEMBER, User.phone = 신청서 연락처
    2. Member 생성 (학번 / 학과 / 세션 / 학습 트랙 / 프로필 이미지)
    3. 신청서 상태 APPROVED
    4. reviewer_id 가 있으면 관리자 로그 기록

    어느 단계에서든 실패하면 전체 롤백되며,
    동시 승인으로 Member UNIQUE 가 충돌하면 DuplicateMember 로 보고한다.

    """

    def approve_application(self, application_id: uuid.UUID, *, reviewer_id: uuid.UUID | None = None) -> ApplicationResponse:
        with transaction(self.session_factory, integrity_error=DuplicateMember) as db:
            users = self.user_store(db)
            applications = self.application_store(db)
            members = self.member_store(db)

            application = applications.find_by_id(application_id, for_update=True)
            if not application:
                raise NotFound("Application not found")
            if application.status != ApplicationStatus.PENDING:
                raise AlreadyReviewed()

            if members.find_by_user_id(application.user_id):
                raise DuplicateMember()

            user = users.find_by_id(application.user_id)
            if not user:
                raise NotFound("Application user missing")

            before_role = user.role
            extra = {"phone": application.phone_number} if application.phone_number else {}
            users.update_role(user, Role.MEMBER, **extra)

            members.create(
                user_id=application.user_id,
                student_id=application.student_id,
                department_id=application.department_id,
                session_id=application.session_id,
                learning_track_id=application.learning_track_id,
                profile_image=application.profile_image,
            )

            applications.update(application, status=ApplicationStatus.APPROVED, reviewed_at=utcnow())

            if reviewer_id:
                write_admin_log(
                    db,
                    actor_id=reviewer_id,
                    action=AdminAction.APPROVE_APPLICATION,
                    target_user_id=user.id,
                    before_role=before_role.value,
                    after_role=Role.MEMBER.value,
                )

            logger.info(
                "Application approved",
                extra={"application_id": str(application.id), "user_id": str(user.id)},
            )
            return ApplicationResponse.model_validate(application)

    """
    가입 신청서 거절

    - 거절 사유(review_comment)는 필수, 공백만 있으면 ValidationError
    - 신청서 존재 + PENDING 상태여야 함
    - status=REJECTED, review_comment, reviewed_at=now 기록
    - 신청자는 이후 재제출 가능

    """

    def reject_application(
        self,
        application_id: uuid.UUID,
        review_comment: str | None,
        *,
        reviewer_id: uuid.UUID | None = None,
    ) -> ApplicationResponse:
        comment = (review_comment or "").strip()
        if not comment:
            raise ValidationError("Review comment is required")

        with transaction(self.session_factory) as db:
            applications = self.application_store(db)

            application = applications.find_by_id(application_id, for_update=True)
            if not application:
                raise NotFound("Application not found")
            if application.status != ApplicationStatus.PENDING:
                raise AlreadyReviewed()

            applications.update(
                application,
                status=ApplicationStatus.REJECTED,
                review_comment=comment,
                reviewed_at=utcnow(),
            )

            if reviewer_id:
                write_admin_log(
                    db,
                    actor_id=reviewer_id,
                    action=AdminAction.REJECT_APPLICATION,
                    target_user_id=application.user_id,
                    note=comment,
                )

            logger.info("Application rejected", extra={"application_id": str(application.id)})
            return ApplicationResponse.model_validate(application)

    # 참조 대상이 존재하고 삭제되지 않았는지 확인
    def _ensure_references(self, db: Session, payload: ApplicationSubmitRequest) -> None:
        get_department(db, payload.department_id)
        get_session(db, payload.session_id)
        if payload.learning_track_id:
            require_active_learning_track(db, payload.learning_track_id)
