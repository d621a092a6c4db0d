"""Student-to-module enrollment ledger.

Bulk paths commit pair by pair so one bad row never undoes the rows before it.
Uniqueness of (student, module) is enforced by the table constraint; a pair
that trips it is reported as skipped.
"""
from __future__ import annotations

from collections.abc import Iterable
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import ResourceNotFoundError, ValidationError
from app.db.base import utc_now
from app.models.enrollment import Enrollment, EnrollmentStatus
from app.models.user import UserRole
from app.schemas.enrollment import BulkEnrollResult, EnrollmentOutcome
from app.services.hierarchy import HierarchyDirectory

logger = logging.getLogger(__name__)


def _pair_failure(reason: str, student_id: str, module_id: str) -> EnrollmentOutcome:
    return EnrollmentOutcome(student_id=student_id, module_id=module_id, outcome="failed", error=reason)


def bulk_create(
    db: Session,
    directory: HierarchyDirectory,
    pairs: Iterable[tuple[str, str]],
) -> BulkEnrollResult:
    pairs = list(pairs)
    max_pairs = get_settings().bulk_enroll_max_pairs
    if len(pairs) > max_pairs:
        raise ValidationError(
            f"Too many enrollment pairs ({len(pairs)}); limit is {max_pairs}",
            details={"limit": max_pairs},
        )

    result = BulkEnrollResult()
    known_students: dict[str, bool] = {}
    known_modules: dict[str, bool] = {}

    for student_id, module_id in pairs:
        if student_id not in known_students:
            student = directory.get_user(student_id)
            known_students[student_id] = student is not None and student.role == UserRole.student
        if module_id not in known_modules:
            known_modules[module_id] = directory.get_module(module_id) is not None

        if not known_students[student_id]:
            result.failed += 1
            result.outcomes.append(_pair_failure("student not found", student_id, module_id))
            continue
        if not known_modules[module_id]:
            result.failed += 1
            result.outcomes.append(_pair_failure("module not found", student_id, module_id))
            continue

        db.add(
            Enrollment(
                student_id=student_id,
                module_id=module_id,
                status=EnrollmentStatus.active,
                enrolled_at=utc_now(),
            )
        )
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            result.skipped += 1
            result.outcomes.append(
                EnrollmentOutcome(student_id=student_id, module_id=module_id, outcome="skipped")
            )
            logger.debug("Enrollment %s/%s already exists, skipped", student_id, module_id)
            continue
        result.inserted += 1
        result.outcomes.append(EnrollmentOutcome(student_id=student_id, module_id=module_id, outcome="inserted"))

    logger.info(
        "Bulk enrollment processed %d pair(s): %d inserted, %d skipped, %d failed",
        result.total,
        result.inserted,
        result.skipped,
        result.failed,
    )
    return result


def batch_enroll(
    db: Session,
    directory: HierarchyDirectory,
    *,
    student_ids: list[str],
    module_ids: list[str],
) -> BulkEnrollResult:
    students = list(dict.fromkeys(item for item in student_ids if item))
    modules = list(dict.fromkeys(item for item in module_ids if item))
    return bulk_create(db, directory, [(student, module) for student in students for module in modules])


def auto_enroll_by_degree(
    db: Session,
    directory: HierarchyDirectory,
    *,
    student_id: str,
    degree_program_id: str | None = None,
) -> BulkEnrollResult:
    """Enroll a student in every module currently attached to a degree program.

    Falls back to the student's own degree program when none is given.
    """
    student = directory.get_user(student_id)
    if student is None or student.role != UserRole.student:
        raise ResourceNotFoundError("Student", student_id)
    degree_id = degree_program_id or student.degree_program_id
    if not degree_id:
        raise ValidationError("Student has no degree program to enroll from", details={"student_id": student_id})

    module_ids = directory.list_degree_module_ids(degree_id)
    if not module_ids:
        logger.info("Degree program %s has no modules; nothing to enroll for %s", degree_id, student_id)
        return BulkEnrollResult()
    return bulk_create(db, directory, [(student.id, module_id) for module_id in module_ids])


def list_enrollments(db: Session, student_id: str) -> list[Enrollment]:
    return list(
        db.execute(
            select(Enrollment)
            .where(Enrollment.student_id == student_id)
            .order_by(Enrollment.enrolled_at.asc(), Enrollment.module_id.asc())
        ).scalars()
    )


def active_module_ids(db: Session, student_id: str) -> set[str]:
    return set(
        db.execute(
            select(Enrollment.module_id).where(
                Enrollment.student_id == student_id,
                Enrollment.status == EnrollmentStatus.active,
            )
        ).scalars()
    )
