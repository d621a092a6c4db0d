from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.models.enrollment import EnrollmentStatus


class EnrollmentPair(BaseModel):
    student_id: str = Field(min_length=1, max_length=36)
    module_id: str = Field(min_length=1, max_length=36)


class BulkEnrollRequest(BaseModel):
    pairs: list[EnrollmentPair] = Field(min_length=1)


class BatchEnrollRequest(BaseModel):
    student_ids: list[str] = Field(min_length=1)
    module_ids: list[str] = Field(min_length=1)


class AutoEnrollRequest(BaseModel):
    student_id: str = Field(min_length=1, max_length=36)
    degree_program_id: str | None = Field(default=None, max_length=36)


class EnrollmentOutcome(BaseModel):
    student_id: str
    module_id: str
    outcome: Literal["inserted", "skipped", "failed"]
    error: str | None = None


class BulkEnrollResult(BaseModel):
    inserted: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: list[EnrollmentOutcome] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.inserted + self.skipped + self.failed


class EnrollmentOut(BaseModel):
    id: str
    student_id: str
    module_id: str
    status: EnrollmentStatus
    enrolled_at: datetime

    model_config = {"from_attributes": True}
