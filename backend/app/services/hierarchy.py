from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.models.hierarchy import Department, Faculty, Module
from app.models.user import User, UserRole


@dataclass(frozen=True)
class DepartmentRef:
    id: str
    name: str
    faculty_id: str | None = None


@dataclass(frozen=True)
class LecturerRecord:
    id: str
    name: str
    email: str
    department_id: str | None = None
    department_name: str | None = None
    faculty_id: str | None = None
    faculty_name: str | None = None
    modules: tuple[Module, ...] = field(default_factory=tuple)


class HierarchyDirectory(Protocol):
    """Read-only view of faculty/department/degree/module containment and staff membership."""

    def get_user(self, user_id: str) -> User | None: ...

    def get_department_of(self, student_id: str) -> DepartmentRef | None: ...

    def get_lecturer(self, lecturer_id: str) -> User | None: ...

    def list_lecturers(
        self,
        *,
        department_id: str | None = None,
        faculty_id: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[LecturerRecord]: ...

    def get_module(self, module_id: str) -> Module | None: ...

    def list_degree_module_ids(self, degree_program_id: str) -> list[str]: ...


class SqlHierarchyDirectory:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get_user(self, user_id: str) -> User | None:
        user = self._db.get(User, user_id)
        if user is None or not user.is_active:
            return None
        return user

    def get_department_of(self, student_id: str) -> DepartmentRef | None:
        student = self.get_user(student_id)
        if student is None or not student.department_id:
            return None
        department = self._db.get(Department, student.department_id)
        if department is None:
            # Stale reference; treat the student as unassigned.
            return None
        return DepartmentRef(id=department.id, name=department.name, faculty_id=department.faculty_id)

    def get_lecturer(self, lecturer_id: str) -> User | None:
        user = self.get_user(lecturer_id)
        if user is None or user.role != UserRole.lecturer:
            return None
        return user

    def list_lecturers(
        self,
        *,
        department_id: str | None = None,
        faculty_id: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[LecturerRecord]:
        query = select(User).where(User.role == UserRole.lecturer, User.is_active.is_(True))
        if department_id:
            query = query.where(User.department_id == department_id)
        elif faculty_id:
            department_ids = select(Department.id).where(Department.faculty_id == faculty_id)
            query = query.where(User.department_id.in_(department_ids))
        term = (search or "").strip().lower()
        if term:
            escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            pattern = f"%{escaped}%"
            query = query.where(
                or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\"))
            )
        query = query.order_by(User.name.asc(), User.email.asc())
        if limit:
            query = query.limit(limit)
        lecturers = list(self._db.execute(query).scalars())
        if not lecturers:
            return []

        department_ids = {item.department_id for item in lecturers if item.department_id}
        departments = {
            item.id: item
            for item in self._db.execute(select(Department).where(Department.id.in_(department_ids))).scalars()
        }
        faculty_ids = {item.faculty_id for item in departments.values() if item.faculty_id}
        faculties = {
            item.id: item
            for item in self._db.execute(select(Faculty).where(Faculty.id.in_(faculty_ids))).scalars()
        }
        led_modules: dict[str, list[Module]] = {}
        for module in self._db.execute(
            select(Module)
            .where(Module.leader_id.in_([item.id for item in lecturers]))
            .order_by(Module.code.asc())
        ).scalars():
            led_modules.setdefault(module.leader_id, []).append(module)

        records: list[LecturerRecord] = []
        for lecturer in lecturers:
            department = departments.get(lecturer.department_id) if lecturer.department_id else None
            faculty = faculties.get(department.faculty_id) if department and department.faculty_id else None
            records.append(
                LecturerRecord(
                    id=lecturer.id,
                    name=lecturer.name,
                    email=lecturer.email,
                    department_id=department.id if department else None,
                    department_name=department.name if department else None,
                    faculty_id=faculty.id if faculty else None,
                    faculty_name=faculty.name if faculty else None,
                    modules=tuple(led_modules.get(lecturer.id, [])),
                )
            )
        return records

    def get_module(self, module_id: str) -> Module | None:
        return self._db.get(Module, module_id)

    def list_degree_module_ids(self, degree_program_id: str) -> list[str]:
        return list(
            self._db.execute(
                select(Module.id).where(Module.degree_program_id == degree_program_id).order_by(Module.code.asc())
            ).scalars()
        )
