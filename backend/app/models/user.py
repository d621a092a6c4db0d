import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base, utc_now


class UserRole(str, Enum):
    student = "student"
    lecturer = "lecturer"
    admin = "admin"


class AdminType(str, Enum):
    super_admin = "super_admin"
    medical_officer = "medical_officer"
    exam_admin = "exam_admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(SAEnum(UserRole, name="user_role"), nullable=False)
    admin_type: Mapped[AdminType | None] = mapped_column(SAEnum(AdminType, name="admin_type"), nullable=True)
    # Both optional: imported students frequently arrive without hierarchy data.
    department_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    degree_program_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=utc_now)
