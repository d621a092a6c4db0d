from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.models.user import User
from app.schemas.notification import MarkAllReadResult, NotificationMarkResult, NotificationView
from app.services import notification_feed

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationView])
def list_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[NotificationView]:
    return notification_feed.get_feed(db, current_user.id)


@router.post("/notifications/read-all", response_model=MarkAllReadResult)
def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MarkAllReadResult:
    updated = notification_feed.mark_all_read(db, current_user.id)
    db.commit()
    return MarkAllReadResult(updated=updated)


@router.post("/notifications/{notification_id}/read", response_model=NotificationMarkResult)
def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationMarkResult:
    result = notification_feed.mark_read(db, current_user.id, notification_id)
    db.commit()
    return result


@router.post("/notifications/{notification_id}/dismiss", response_model=NotificationMarkResult)
def dismiss_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationMarkResult:
    result = notification_feed.dismiss(db, current_user.id, notification_id)
    db.commit()
    return result
