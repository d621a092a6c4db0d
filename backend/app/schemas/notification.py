from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

NotificationKind = Literal["success", "error", "info", "notice"]


class NotificationView(BaseModel):
    id: str
    title: str
    message: str
    type: NotificationKind
    read: bool
    created_at: datetime
    meta: dict[str, Any] | None = None


class NotificationMarkResult(BaseModel):
    id: str
    dismissed: bool
    read: bool


class MarkAllReadResult(BaseModel):
    updated: int
