"""
services/pagination.py

목록 조회 API 공통 페이지네이션 계산.

- page 는 1부터 시작
- limit 미지정 시 DEFAULT_PAGE_LIMIT, 최대 MAX_PAGE_LIMIT 로 제한
- sort_by 는 각 목록이 허용한 필드만 사용 가능 (아니면 ValidationError)
- 기본 정렬은 created_at 내림차순

"""

from dataclasses import dataclass
from typing import Iterable, Literal

from app.core.config import settings
from app.core.errors import ValidationError

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    skip: int
    sort_by: str
    sort_order: SortOrder


def calculate_pagination(
    *,
    page: int | None = None,
    limit: int | None = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    sortable: Iterable[str] = ("created_at",),
    default_sort: str = "created_at",
) -> Pagination:
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else settings.DEFAULT_PAGE_LIMIT
    limit = min(limit, settings.MAX_PAGE_LIMIT)

    sort_by = sort_by or default_sort
    if sort_by not in set(sortable):
        raise ValidationError(f"Cannot sort by '{sort_by}'")

    sort_order = (sort_order or "desc").lower()
    if sort_order not in ("asc", "desc"):
        raise ValidationError("sort_order must be 'asc' or 'desc'")

    return Pagination(
        page=page,
        limit=limit,
        skip=(page - 1) * limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
