import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, utc_now


class NotificationState(Base):
    """Per-user overlay on the derived notification feed.

    Holds only source-record ids (medical requests, notices); both lists are
    treated as grow-only sets. Writes are optimistic: ``version`` is checked on
    every UPDATE, so a writer holding a stale copy fails instead of overwriting.
    """

    __tablename__ = "notification_states"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), unique=True, index=True, nullable=False)
    dismissed_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    read_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=utc_now)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
