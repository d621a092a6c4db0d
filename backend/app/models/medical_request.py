import uuid
from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, DateTime, Enum as SAEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base, utc_now


class MedicalStatus(str, Enum):
    pending = "pending"
    approved_by_officer = "approved_by_officer"
    rejected = "rejected"
    forwarded_to_dept = "forwarded_to_dept"
    approved_by_dept = "approved_by_dept"


class MedicalRequest(Base):
    __tablename__ = "medical_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    status: Mapped[MedicalStatus] = mapped_column(
        SAEnum(MedicalStatus, name="medical_status"),
        nullable=False,
        default=MedicalStatus.pending,
        index=True,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    certificate_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    officer_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    officer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    forwarded_to_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    forwarded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    admin_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )
