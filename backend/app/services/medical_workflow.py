"""Lifecycle of a medical leave request.

Statuses move only along ``TRANSITIONS``. Every move is a compare-and-set on
``status`` so that two reviewers acting on the same request at once cannot both
win: the loser's conditional UPDATE matches no rows and raises ``ConflictError``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    ResourceNotFoundError,
    ValidationError,
)
from app.db.base import utc_now
from app.models.medical_request import MedicalRequest, MedicalStatus
from app.models.user import UserRole
from app.services.hierarchy import HierarchyDirectory

logger = logging.getLogger(__name__)

DECISIONS = ("approve", "reject")


@dataclass(frozen=True)
class Transition:
    action: str
    source: MedicalStatus
    target: MedicalStatus


TRANSITIONS: dict[str, Transition] = {
    item.action: item
    for item in (
        Transition("officer_approve", MedicalStatus.pending, MedicalStatus.approved_by_officer),
        Transition("officer_reject", MedicalStatus.pending, MedicalStatus.rejected),
        Transition("forward", MedicalStatus.approved_by_officer, MedicalStatus.forwarded_to_dept),
        Transition("department_approve", MedicalStatus.forwarded_to_dept, MedicalStatus.approved_by_dept),
        Transition("department_reject", MedicalStatus.forwarded_to_dept, MedicalStatus.rejected),
    )
}

TERMINAL_STATUSES = frozenset({MedicalStatus.rejected, MedicalStatus.approved_by_dept})


def _normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def _require_decision(decision: str) -> str:
    normalized = (decision or "").strip().lower()
    if normalized not in DECISIONS:
        raise ValidationError("Decision must be 'approve' or 'reject'", details={"decision": decision})
    return normalized


def allowed_actions(status: MedicalStatus) -> list[str]:
    return [item.action for item in TRANSITIONS.values() if item.source == status]


def get_request(db: Session, request_id: str) -> MedicalRequest:
    request = db.get(MedicalRequest, request_id)
    if request is None:
        raise ResourceNotFoundError("Medical request", request_id)
    return request


def list_requests(
    db: Session,
    *,
    status: MedicalStatus | None = None,
    student_id: str | None = None,
    forwarded_to_id: str | None = None,
) -> list[MedicalRequest]:
    query = select(MedicalRequest)
    if status is not None:
        query = query.where(MedicalRequest.status == status)
    if student_id is not None:
        query = query.where(MedicalRequest.student_id == student_id)
    if forwarded_to_id is not None:
        query = query.where(MedicalRequest.forwarded_to_id == forwarded_to_id)
    query = query.order_by(MedicalRequest.created_at.desc(), MedicalRequest.id.asc())
    return list(db.execute(query).scalars())


def submit_request(
    db: Session,
    directory: HierarchyDirectory,
    *,
    student_id: str,
    reason: str,
    start_date: date,
    end_date: date,
    certificate_url: str | None = None,
) -> MedicalRequest:
    cleaned_reason = _normalize_text(reason)
    if cleaned_reason is None:
        raise ValidationError("Medical reason is required")
    if start_date > end_date:
        raise ValidationError(
            "Start date must be on or before end date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    student = directory.get_user(student_id)
    if student is None or student.role != UserRole.student:
        raise ResourceNotFoundError("Student", student_id)

    now = utc_now()
    request = MedicalRequest(
        student_id=student.id,
        status=MedicalStatus.pending,
        reason=cleaned_reason,
        start_date=start_date,
        end_date=end_date,
        certificate_url=_normalize_text(certificate_url),
        created_at=now,
        updated_at=now,
    )
    db.add(request)
    db.flush()
    logger.info("Medical request %s submitted by student %s", request.id, student.id)
    return request


def _apply_transition(db: Session, request_id: str, action: str, **values) -> MedicalRequest:
    transition = TRANSITIONS[action]
    request = get_request(db, request_id)
    if request.status != transition.source:
        logger.warning(
            "Rejected %s on medical request %s: status is %s",
            action,
            request_id,
            request.status.value,
        )
        raise InvalidTransitionError(action=action, current_status=request.status.value)

    result = db.execute(
        update(MedicalRequest)
        .where(MedicalRequest.id == request_id, MedicalRequest.status == transition.source)
        .values(status=transition.target, updated_at=utc_now(), **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning("Lost concurrent update on medical request %s during %s", request_id, action)
        raise ConflictError(
            "Medical request was changed by another reviewer; reload and retry",
            details={"request_id": request_id, "expected_status": transition.source.value},
        )

    db.refresh(request)
    logger.info(
        "Medical request %s: %s -> %s (%s)",
        request_id,
        transition.source.value,
        transition.target.value,
        action,
    )
    return request


def officer_decide(
    db: Session,
    *,
    request_id: str,
    decision: str,
    comments: str | None = None,
    officer_id: str | None = None,
) -> MedicalRequest:
    normalized = _require_decision(decision)
    cleaned = _normalize_text(comments)
    if normalized == "reject" and cleaned is None:
        raise ValidationError("Comments are required when rejecting a medical request")
    return _apply_transition(
        db,
        request_id,
        f"officer_{normalized}",
        officer_comments=cleaned,
        officer_id=officer_id,
    )


def forward(db: Session, *, request_id: str, lecturer_id: str) -> MedicalRequest:
    """Move an officer-approved request to a lecturer. Callers validate the lecturer first."""
    return _apply_transition(
        db,
        request_id,
        "forward",
        forwarded_to_id=lecturer_id,
        forwarded_at=utc_now(),
    )


def department_decide(
    db: Session,
    *,
    request_id: str,
    decision: str,
    comments: str | None = None,
    reviewer_id: str | None = None,
) -> MedicalRequest:
    normalized = _require_decision(decision)
    return _apply_transition(
        db,
        request_id,
        f"department_{normalized}",
        admin_comments=_normalize_text(comments),
        reviewer_id=reviewer_id,
    )
