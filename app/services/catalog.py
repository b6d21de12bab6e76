"""
services/catalog.py

학과(Department) / 세션(AcademicSession) / 학습 트랙(LearningTrack) 관리 로직.

가입 신청서와 회원 프로필이 참조하는 기준 데이터이며,
라우터에서는 이 파일의 함수를 호출한 뒤 commit 만 수행한다.

설계 원칙:
- HTTP / FastAPI 의존성 없음, 규칙 위반은 도메인 오류로 표현
- 트랜잭션 제어(commit/rollback)는 라우터에서 수행
- 삭제는 모두 Soft Delete

"""

import re
import uuid

from sqlalchemy import select, func, or_, asc, desc
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, ValidationError
from app.db.base import utcnow
from app.models.catalog import Department, AcademicSession, LearningTrack
from app.models.membership import Member, MembershipApplication
from app.schemas.catalog import LearningTrackCreateRequest, LearningTrackUpdateRequest
from app.services.pagination import Pagination


_SESSION_RE = re.compile(r"^(\d{2})-(\d{2})$")


"""
세션 이름 형식 검증

- 'YY-YY' 형식만 허용 (예: 24-25)
- 끝 연도는 시작 연도 + 1 이어야 함

"""

def is_valid_session_name(value: str) -> bool:
    match = _SESSION_RE.match(value)
    if not match:
        return False
    start, end = int(match.group(1)), int(match.group(2))
    return end == start + 1


# "Web Development!" -> "web-development"
def slugify(name: str) -> str:
    slug = name.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w\-]+", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    return slug.strip("-")


# ---------------------------------------------------------------- department

def create_department(db: Session, *, name: str) -> Department:
    name = name.strip()
    if db.scalar(select(Department).where(Department.name == name)):
        raise Conflict("Department already exists")

    department = Department(name=name)
    db.add(department)
    db.flush()
    return department


def list_departments(db: Session) -> list[dict]:
    member_count = (
        select(func.count(Member.id)).where(Member.department_id == Department.id).scalar_subquery()
    )
    application_count = (
        select(func.count(MembershipApplication.id))
        .where(MembershipApplication.department_id == Department.id)
        .scalar_subquery()
    )
    rows = db.execute(
        select(Department, member_count, application_count)
        .where(Department.is_deleted.is_(False))
        .order_by(asc(Department.name))
    ).all()

    return [
        {
            "id": d.id,
            "name": d.name,
            "created_at": d.created_at,
            "member_count": members or 0,
            "application_count": applications or 0,
        }
        for d, members, applications in rows
    ]


def get_department(db: Session, department_id: uuid.UUID) -> Department:
    department = db.get(Department, department_id)
    if not department or department.is_deleted:
        raise NotFound("Department not found")
    return department


def soft_delete_department(db: Session, department_id: uuid.UUID) -> Department:
    department = get_department(db, department_id)
    department.is_deleted = True
    return department


# ------------------------------------------------------------------- session

def create_session(db: Session, *, name: str) -> AcademicSession:
    name = name.strip()
    if db.scalar(select(AcademicSession).where(AcademicSession.name == name)):
        raise Conflict("This session already exists")
    if not is_valid_session_name(name):
        raise ValidationError("Session format must be like 23-24")

    session = AcademicSession(name=name)
    db.add(session)
    db.flush()
    return session


def list_sessions(db: Session) -> list[AcademicSession]:
    return list(
        db.scalars(
            select(AcademicSession)
            .where(AcademicSession.is_deleted.is_(False))
            .order_by(desc(AcademicSession.created_at))
        ).all()
    )


def get_session(db: Session, session_id: uuid.UUID) -> AcademicSession:
    session = db.get(AcademicSession, session_id)
    if not session or session.is_deleted:
        raise NotFound("Session not found")
    return session


def soft_delete_session(db: Session, session_id: uuid.UUID) -> AcademicSession:
    session = get_session(db, session_id)
    session.is_deleted = True
    session.deleted_at = utcnow()
    return session


# ------------------------------------------------------------ learning track

LEARNING_TRACK_SORTABLE = {
    "created_at": LearningTrack.created_at,
    "name": LearningTrack.name,
}


def create_learning_track(db: Session, payload: LearningTrackCreateRequest) -> LearningTrack:
    slug = slugify(payload.name)
    if not slug:
        raise ValidationError("Learning track name must contain letters or digits")
    if db.scalar(select(LearningTrack).where(LearningTrack.slug == slug)):
        raise Conflict(f'Slug "{slug}" is already taken')

    track = LearningTrack(slug=slug, **payload.model_dump())
    db.add(track)
    db.flush()
    return track


def list_learning_tracks(
    db: Session,
    *,
    search_term: str | None,
    is_active: bool | None,
    pagination: Pagination,
) -> tuple[list[LearningTrack], int]:
    conditions = [LearningTrack.is_deleted.is_(False)]
    if search_term:
        conditions.append(
            or_(
                LearningTrack.name.icontains(search_term, autoescape=True),
                LearningTrack.short_desc.icontains(search_term, autoescape=True),
            )
        )
    if is_active is not None:
        conditions.append(LearningTrack.is_active.is_(is_active))

    column = LEARNING_TRACK_SORTABLE[pagination.sort_by]
    order = desc(column) if pagination.sort_order == "desc" else asc(column)

    tracks = db.scalars(
        select(LearningTrack)
        .where(*conditions)
        .order_by(order)
        .offset(pagination.skip)
        .limit(pagination.limit)
    ).all()
    total = db.scalar(select(func.count()).select_from(LearningTrack).where(*conditions)) or 0
    return list(tracks), total


# id(UUID) 또는 slug 로 조회, 삭제된 트랙은 없는 것으로 취급
def get_learning_track(db: Session, id_or_slug: str) -> LearningTrack:
    try:
        track = db.get(LearningTrack, uuid.UUID(id_or_slug))
    except ValueError:
        track = db.scalar(select(LearningTrack).where(LearningTrack.slug == id_or_slug))
    if not track or track.is_deleted:
        raise NotFound("Learning track not found")
    return track


"""
학습 트랙 수정

- 보낸 필드만 반영 (name / is_active 에 null 은 무시)
- name 이 바뀌면 slug 도 다시 생성하며, 다른 트랙과 겹치면 Conflict

"""

def update_learning_track(
    db: Session, track_id: uuid.UUID, payload: LearningTrackUpdateRequest
) -> LearningTrack:
    track = db.get(LearningTrack, track_id)
    if not track or track.is_deleted:
        raise NotFound("Learning track not found")

    fields = payload.model_dump(exclude_unset=True)
    for key in ("name", "is_active"):
        if fields.get(key, ...) is None:
            fields.pop(key)

    if "name" in fields:
        slug = slugify(fields["name"])
        if not slug:
            raise ValidationError("Learning track name must contain letters or digits")
        taken = db.scalar(
            select(LearningTrack).where(LearningTrack.slug == slug, LearningTrack.id != track.id)
        )
        if taken:
            raise Conflict(f'Slug "{slug}" is already taken')
        track.slug = slug

    for key, value in fields.items():
        setattr(track, key, value)
    db.flush()
    return track


def soft_delete_learning_track(db: Session, track_id: uuid.UUID) -> LearningTrack:
    track = db.get(LearningTrack, track_id)
    if not track or track.is_deleted:
        raise NotFound("Learning track not found")
    track.is_active = False
    track.is_deleted = True
    track.deleted_at = utcnow()
    return track


def require_active_learning_track(db: Session, track_id: uuid.UUID) -> LearningTrack:
    track = db.get(LearningTrack, track_id)
    if not track or track.is_deleted or not track.is_active:
        raise NotFound("Learning track not found")
    return track
