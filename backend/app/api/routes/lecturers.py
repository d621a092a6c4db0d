from fastapi import APIRouter, Depends, Query

from app.api.deps import get_hierarchy, require_roles
from app.models.user import User, UserRole
from app.schemas.lecturer import LecturerCandidateOut, LedModuleOut
from app.services import routing
from app.services.hierarchy import HierarchyDirectory

router = APIRouter()


@router.get("/lecturers", response_model=list[LecturerCandidateOut])
def list_lecturer_candidates(
    department_id: str | None = Query(default=None),
    faculty_id: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    limit: int | None = Query(default=None, ge=1, le=200),
    current_user: User = Depends(require_roles(UserRole.admin)),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> list[LecturerCandidateOut]:
    candidates = routing.list_candidates(
        directory,
        department_id=department_id,
        faculty_id=faculty_id,
        search=search,
        limit=limit,
    )
    return [
        LecturerCandidateOut(
            id=item.id,
            name=item.name,
            email=item.email,
            department_id=item.department_id,
            department_name=item.department_name,
            faculty_id=item.faculty_id,
            faculty_name=item.faculty_name,
            modules=[LedModuleOut(id=module.id, code=module.code, name=module.name) for module in item.modules],
        )
        for item in candidates
    ]
