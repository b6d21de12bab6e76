"""
stores/applications.py

가입 신청서(MembershipApplication) 저장소.

- 검색(search_term): 신청자 이름/성/이메일, 학번에 대한 대소문자 무시 부분 일치
- 필터: ApplicationFilter 에 정의된 화이트리스트 필드만 equality 비교
- 정렬: SORTABLE_FIELDS 에 정의된 컬럼만 허용

"""

import uuid

from sqlalchemy import select, func, or_, asc, desc
from sqlalchemy.orm import Session, contains_eager

from app.models.membership import MembershipApplication
from app.models.user import User
from app.schemas.membership import ApplicationFilter
from app.services.pagination import Pagination


SORTABLE_FIELDS = {
    "created_at": MembershipApplication.created_at,
    "updated_at": MembershipApplication.updated_at,
    "student_id": MembershipApplication.student_id,
    "status": MembershipApplication.status,
}


class ApplicationStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_user_id(self, user_id: uuid.UUID) -> MembershipApplication | None:
        return self.db.scalar(
            select(MembershipApplication).where(MembershipApplication.user_id == user_id)
        )

    # for_update=True: 승인/거절 트랜잭션 동안 행 잠금 (SELECT ... FOR UPDATE)
    def find_by_id(self, application_id: uuid.UUID, *, for_update: bool = False) -> MembershipApplication | None:
        stmt = select(MembershipApplication).where(MembershipApplication.id == application_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.scalar(stmt)

    def create(self, **fields) -> MembershipApplication:
        application = MembershipApplication(**fields)
        self.db.add(application)
        self.db.flush()
        return application

    def update(self, application: MembershipApplication, **fields) -> MembershipApplication:
        for key, value in fields.items():
            setattr(application, key, value)
        self.db.flush()
        return application

    def _conditions(self, filters: ApplicationFilter) -> list:
        conditions = []

        if filters.search_term:
            term = filters.search_term
            # %, _ 는 와일드카드가 아닌 문자 그대로 검색
            conditions.append(
                or_(
                    MembershipApplication.student_id.icontains(term, autoescape=True),
                    User.first_name.icontains(term, autoescape=True),
                    User.last_name.icontains(term, autoescape=True),
                    User.email.icontains(term, autoescape=True),
                )
            )

        for key, value in filters.model_dump(exclude={"search_term"}, exclude_none=True).items():
            conditions.append(getattr(MembershipApplication, key) == value)

        return conditions

    def list(self, filters: ApplicationFilter, pagination: Pagination) -> list[MembershipApplication]:
        column = SORTABLE_FIELDS[pagination.sort_by]
        order = desc(column) if pagination.sort_order == "desc" else asc(column)

        stmt = (
            select(MembershipApplication)
            .join(User, User.id == MembershipApplication.user_id)
            .options(contains_eager(MembershipApplication.user))
            .where(*self._conditions(filters))
            .order_by(order, MembershipApplication.id)
            .offset(pagination.skip)
            .limit(pagination.limit)
        )
        return list(self.db.scalars(stmt).all())

    def count(self, filters: ApplicationFilter) -> int:
        stmt = (
            select(func.count())
            .select_from(MembershipApplication)
            .join(User, User.id == MembershipApplication.user_id)
            .where(*self._conditions(filters))
        )
        return self.db.scalar(stmt) or 0
