from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.models.medical_request import MedicalStatus


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class MedicalRequestCreate(BaseModel):
    reason: str = Field(max_length=2000)
    start_date: date
    end_date: date
    certificate_url: str | None = Field(default=None, max_length=1000)

    @field_validator("certificate_url")
    @classmethod
    def normalize_certificate_url(cls, value: str | None) -> str | None:
        return _strip_optional(value)


class MedicalDecision(BaseModel):
    decision: Literal["approve", "reject"]
    comments: str | None = Field(default=None, max_length=2000)


class MedicalForward(BaseModel):
    lecturer_id: str = Field(min_length=1, max_length=36)


class MedicalRequestOut(BaseModel):
    id: str
    student_id: str
    status: MedicalStatus
    reason: str
    start_date: date
    end_date: date
    certificate_url: str | None = None
    officer_comments: str | None = None
    officer_id: str | None = None
    forwarded_to_id: str | None = None
    forwarded_at: datetime | None = None
    admin_comments: str | None = None
    reviewer_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RoutingSuggestionOut(BaseModel):
    request_id: str
    department_id: str | None = None
    department_name: str
    assigned: bool
