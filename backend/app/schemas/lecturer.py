from pydantic import BaseModel


class LedModuleOut(BaseModel):
    id: str
    code: str
    name: str


class LecturerCandidateOut(BaseModel):
    id: str
    name: str
    email: str
    department_id: str | None = None
    department_name: str | None = None
    faculty_id: str | None = None
    faculty_name: str | None = None
    modules: list[LedModuleOut] = []
