from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_hierarchy, require_roles
from app.models.user import User, UserRole
from app.schemas.enrollment import (
    AutoEnrollRequest,
    BatchEnrollRequest,
    BulkEnrollRequest,
    BulkEnrollResult,
    EnrollmentOut,
)
from app.services import enrollment_ledger
from app.services.hierarchy import HierarchyDirectory

router = APIRouter()


@router.post("/enrollments/bulk", response_model=BulkEnrollResult)
def bulk_enroll(
    payload: BulkEnrollRequest,
    current_user: User = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> BulkEnrollResult:
    return enrollment_ledger.bulk_create(
        db,
        directory,
        [(pair.student_id, pair.module_id) for pair in payload.pairs],
    )


@router.post("/enrollments/batch", response_model=BulkEnrollResult)
def batch_enroll(
    payload: BatchEnrollRequest,
    current_user: User = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> BulkEnrollResult:
    return enrollment_ledger.batch_enroll(
        db,
        directory,
        student_ids=payload.student_ids,
        module_ids=payload.module_ids,
    )


@router.post("/enrollments/auto", response_model=BulkEnrollResult)
def auto_enroll(
    payload: AutoEnrollRequest,
    current_user: User = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> BulkEnrollResult:
    return enrollment_ledger.auto_enroll_by_degree(
        db,
        directory,
        student_id=payload.student_id,
        degree_program_id=payload.degree_program_id,
    )


@router.get("/students/{student_id}/enrollments", response_model=list[EnrollmentOut])
def list_student_enrollments(
    student_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[EnrollmentOut]:
    if current_user.role != UserRole.admin and current_user.id != student_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    return enrollment_ledger.list_enrollments(db, student_id)
