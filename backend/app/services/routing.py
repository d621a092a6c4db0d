from __future__ import annotations

from dataclasses import dataclass
import logging

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import InvalidTargetError
from app.models.medical_request import MedicalRequest
from app.services import medical_workflow
from app.services.hierarchy import HierarchyDirectory, LecturerRecord

logger = logging.getLogger(__name__)

UNASSIGNED_LABEL = "Unassigned"


@dataclass(frozen=True)
class RoutingSuggestion:
    request_id: str
    department_id: str | None
    department_name: str

    @property
    def assigned(self) -> bool:
        return self.department_id is not None


def suggest_target(directory: HierarchyDirectory, request: MedicalRequest) -> RoutingSuggestion:
    """Advisory scope for the forward picker: the student's department, if it is known."""
    department = directory.get_department_of(request.student_id)
    if department is None:
        return RoutingSuggestion(request_id=request.id, department_id=None, department_name=UNASSIGNED_LABEL)
    return RoutingSuggestion(request_id=request.id, department_id=department.id, department_name=department.name)


def list_candidates(
    directory: HierarchyDirectory,
    *,
    department_id: str | None = None,
    faculty_id: str | None = None,
    search: str | None = None,
    limit: int | None = None,
) -> list[LecturerRecord]:
    return directory.list_lecturers(
        department_id=department_id or None,
        faculty_id=faculty_id or None,
        search=search,
        limit=limit or get_settings().lecturer_search_limit,
    )


def forward(
    db: Session,
    directory: HierarchyDirectory,
    *,
    request_id: str,
    lecturer_id: str,
) -> MedicalRequest:
    lecturer = directory.get_lecturer(lecturer_id)
    if lecturer is None:
        logger.warning("Forward of medical request %s to unknown lecturer %s", request_id, lecturer_id)
        raise InvalidTargetError(lecturer_id)
    return medical_workflow.forward(db, request_id=request_id, lecturer_id=lecturer.id)
