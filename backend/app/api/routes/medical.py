from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import (
    REVIEW_ADMIN_TYPES,
    get_current_user,
    get_db,
    get_hierarchy,
    require_admin_types,
    require_roles,
)
from app.models.medical_request import MedicalRequest, MedicalStatus
from app.models.user import User, UserRole
from app.schemas.medical import (
    MedicalDecision,
    MedicalForward,
    MedicalRequestCreate,
    MedicalRequestOut,
    RoutingSuggestionOut,
)
from app.services import medical_workflow, routing
from app.services.hierarchy import HierarchyDirectory

router = APIRouter()


def _ensure_can_view(request: MedicalRequest, current_user: User) -> None:
    if current_user.role == UserRole.admin:
        return
    if current_user.role == UserRole.student and request.student_id == current_user.id:
        return
    if current_user.role == UserRole.lecturer and request.forwarded_to_id == current_user.id:
        return
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Medical request not found")


@router.get("/medical-requests", response_model=list[MedicalRequestOut])
def list_medical_requests(
    request_status: MedicalStatus | None = Query(default=None, alias="status"),
    student_id: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MedicalRequestOut]:
    if current_user.role == UserRole.student:
        return medical_workflow.list_requests(db, status=request_status, student_id=current_user.id)
    if current_user.role == UserRole.lecturer:
        return medical_workflow.list_requests(
            db,
            status=request_status,
            student_id=student_id,
            forwarded_to_id=current_user.id,
        )
    return medical_workflow.list_requests(db, status=request_status, student_id=student_id)


@router.post(
    "/medical-requests",
    response_model=MedicalRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def submit_medical_request(
    payload: MedicalRequestCreate,
    current_user: User = Depends(require_roles(UserRole.student)),
    db: Session = Depends(get_db),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> MedicalRequestOut:
    request = medical_workflow.submit_request(
        db,
        directory,
        student_id=current_user.id,
        reason=payload.reason,
        start_date=payload.start_date,
        end_date=payload.end_date,
        certificate_url=payload.certificate_url,
    )
    db.commit()
    db.refresh(request)
    return request


@router.get("/medical-requests/{request_id}", response_model=MedicalRequestOut)
def get_medical_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicalRequestOut:
    request = medical_workflow.get_request(db, request_id)
    _ensure_can_view(request, current_user)
    return request


@router.post("/medical-requests/{request_id}/officer-decision", response_model=MedicalRequestOut)
def officer_decision(
    request_id: str,
    payload: MedicalDecision,
    current_user: User = Depends(require_admin_types(*REVIEW_ADMIN_TYPES)),
    db: Session = Depends(get_db),
) -> MedicalRequestOut:
    request = medical_workflow.officer_decide(
        db,
        request_id=request_id,
        decision=payload.decision,
        comments=payload.comments,
        officer_id=current_user.id,
    )
    db.commit()
    db.refresh(request)
    return request


@router.get("/medical-requests/{request_id}/routing-suggestion", response_model=RoutingSuggestionOut)
def routing_suggestion(
    request_id: str,
    current_user: User = Depends(require_admin_types(*REVIEW_ADMIN_TYPES)),
    db: Session = Depends(get_db),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> RoutingSuggestionOut:
    suggestion = routing.suggest_target(directory, medical_workflow.get_request(db, request_id))
    return RoutingSuggestionOut(
        request_id=suggestion.request_id,
        department_id=suggestion.department_id,
        department_name=suggestion.department_name,
        assigned=suggestion.assigned,
    )


@router.post("/medical-requests/{request_id}/forward", response_model=MedicalRequestOut)
def forward_medical_request(
    request_id: str,
    payload: MedicalForward,
    current_user: User = Depends(require_admin_types(*REVIEW_ADMIN_TYPES)),
    db: Session = Depends(get_db),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> MedicalRequestOut:
    request = routing.forward(db, directory, request_id=request_id, lecturer_id=payload.lecturer_id)
    db.commit()
    db.refresh(request)
    return request


@router.post("/medical-requests/{request_id}/department-decision", response_model=MedicalRequestOut)
def department_decision(
    request_id: str,
    payload: MedicalDecision,
    current_user: User = Depends(require_roles(UserRole.lecturer)),
    db: Session = Depends(get_db),
) -> MedicalRequestOut:
    request = medical_workflow.get_request(db, request_id)
    if request.forwarded_to_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Medical request is not forwarded to you",
        )
    request = medical_workflow.department_decide(
        db,
        request_id=request_id,
        decision=payload.decision,
        comments=payload.comments,
        reviewer_id=current_user.id,
    )
    db.commit()
    db.refresh(request)
    return request
