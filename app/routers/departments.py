"""
departments.py

학과(Department) API 모음.

- 학과 목록은 가입 신청 화면에서 사용되므로 공개
- 생성 / 단건 조회 / 삭제는 관리자 전용
- 삭제는 Soft Delete (기존 신청서 / 회원 기록 보존)

"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.core.errors import DomainError
from app.models.user import User
from app.schemas.catalog import DepartmentCreateRequest, DepartmentResponse, DepartmentWithCounts
from app.services.catalog import (
    create_department,
    get_department,
    list_departments,
    soft_delete_department,
)

router = APIRouter(prefix="/departments", tags=["departments"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    data: DepartmentCreateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        department = create_department(db, name=data.name)
        db.commit()
        db.refresh(department)
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Department created successfully",
        "data": DepartmentResponse.model_validate(department).model_dump(mode="json"),
    }


# 학과별 회원 수 / 신청서 수 포함, 이름 오름차순
@router.get("")
def list_all(db: Session = Depends(get_db)):
    rows = list_departments(db)
    return {
        "message": "Departments retrieved successfully",
        "data": [DepartmentWithCounts(**row).model_dump(mode="json") for row in rows],
    }


@router.get("/{department_id}")
def get_one(
    department_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    department = get_department(db, department_id)
    return {
        "message": "Department retrieved successfully",
        "data": DepartmentResponse.model_validate(department).model_dump(mode="json"),
    }


@router.delete("/{department_id}")
def delete(
    department_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        department = soft_delete_department(db, department_id)
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Department deleted successfully",
        "data": {"id": str(department.id)},
    }
