"""Per-user notification feed derived from live records.

Nothing here stores notification content. The feed is rebuilt on every call
from medical requests and module notices, then overlaid with the user's
``NotificationState`` (ids they dismissed or read). Notification ids are the
ids of the source records, so a request keeps one notification for its whole
lifecycle.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.config import get_settings
from app.core.exceptions import ConflictError, ResourceNotFoundError
from app.db.base import utc_now
from app.models.medical_request import MedicalRequest, MedicalStatus
from app.models.notice import Notice
from app.models.notification_state import NotificationState
from app.schemas.notification import NotificationMarkResult, NotificationView
from app.services import enrollment_ledger

logger = logging.getLogger(__name__)

MEDICAL_UPDATE_TITLE = "Medical Request Update"
AWAITING_REVIEW_TITLE = "Medical Request Awaiting Review"
STATE_WRITE_ATTEMPTS = 3


@dataclass(frozen=True)
class FeedSource:
    id: str
    title: str
    message: str
    type: str
    created_at: datetime
    meta: dict[str, Any] = field(default_factory=dict)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_status(status: MedicalStatus) -> str:
    return " ".join(part.capitalize() for part in status.value.split("_"))


def medical_notification_type(status: MedicalStatus) -> str:
    if status == MedicalStatus.rejected:
        return "error"
    if "approved" in status.value:
        return "success"
    return "info"


def _medical_meta(request: MedicalRequest) -> dict[str, Any]:
    return {
        "kind": "medical_request",
        "status": request.status.value,
        "start_date": request.start_date.isoformat(),
        "end_date": request.end_date.isoformat(),
        "officer_comments": request.officer_comments,
        "admin_comments": request.admin_comments,
        "forwarded_to_id": request.forwarded_to_id,
    }


def _medical_update(request: MedicalRequest) -> FeedSource:
    message = (
        f"Your medical request submitted on {request.created_at.date().isoformat()} "
        f"is {format_status(request.status)}."
    )
    latest_comment = request.admin_comments or request.officer_comments
    if latest_comment:
        message += f" Message: {latest_comment}"
    return FeedSource(
        id=request.id,
        title=MEDICAL_UPDATE_TITLE,
        message=message,
        type=medical_notification_type(request.status),
        created_at=_as_utc(request.updated_at),
        meta=_medical_meta(request),
    )


def _awaiting_review(request: MedicalRequest) -> FeedSource:
    return FeedSource(
        id=request.id,
        title=AWAITING_REVIEW_TITLE,
        message=(
            f"A medical request for {request.start_date.isoformat()} to {request.end_date.isoformat()} "
            "has been forwarded to you for a department decision."
        ),
        type="info",
        created_at=_as_utc(request.forwarded_at or request.updated_at),
        meta=_medical_meta(request),
    )


def _notice_item(notice: Notice) -> FeedSource:
    return FeedSource(
        id=notice.id,
        title=f"{notice.module_code}: {notice.title}",
        message=notice.content,
        type="notice",
        created_at=_as_utc(notice.created_at),
        meta={
            "kind": "notice",
            "module_id": notice.module_id,
            "module_code": notice.module_code,
            "author_id": notice.author_id,
            "author_name": notice.author_name,
        },
    )


def collect_sources(db: Session, user_id: str, *, now: datetime | None = None) -> list[FeedSource]:
    """Every record that could appear in ``user_id``'s feed, before the dismiss/read overlay."""
    reference = _as_utc(now) if now is not None else utc_now()
    items: list[FeedSource] = []

    own_requests = db.execute(
        select(MedicalRequest).where(
            MedicalRequest.student_id == user_id,
            MedicalRequest.status != MedicalStatus.pending,
        )
    ).scalars()
    items.extend(_medical_update(request) for request in own_requests)

    awaiting = db.execute(
        select(MedicalRequest).where(
            MedicalRequest.forwarded_to_id == user_id,
            MedicalRequest.status == MedicalStatus.forwarded_to_dept,
        )
    ).scalars()
    items.extend(_awaiting_review(request) for request in awaiting)

    module_ids = enrollment_ledger.active_module_ids(db, user_id)
    if module_ids:
        cutoff = reference - timedelta(days=get_settings().notice_window_days)
        notices = db.execute(
            select(Notice).where(
                Notice.module_id.in_(module_ids),
                Notice.created_at >= cutoff,
            )
        ).scalars()
        items.extend(_notice_item(notice) for notice in notices)

    return items


def _load_state(db: Session, user_id: str) -> NotificationState | None:
    return db.execute(select(NotificationState).where(NotificationState.user_id == user_id)).scalar_one_or_none()


def _union(existing: list[str] | None, additions: list[str]) -> list[str]:
    return list(dict.fromkeys([*(existing or []), *additions]))


def _update_state(
    db: Session,
    user_id: str,
    apply: Callable[[NotificationState], int],
) -> tuple[NotificationState, int]:
    """Run ``apply`` against the user's state row and flush it, retrying on concurrent writers.

    ``apply`` mutates the row and returns how many ids it added. A lost race
    (stale ``version`` or a duplicate first insert) rolls the session back,
    reloads the row and applies the change again, so ids from both writers
    survive.
    """
    for attempt in range(1, STATE_WRITE_ATTEMPTS + 1):
        try:
            state = _load_state(db, user_id)
            if state is None:
                state = NotificationState(user_id=user_id, dismissed_ids=[], read_ids=[])
                db.add(state)
            added = apply(state)
            db.flush()
            return state, added
        except (StaleDataError, IntegrityError):
            db.rollback()
            logger.info("Notification state for user %s changed concurrently (attempt %d)", user_id, attempt)
    raise ConflictError(
        "Notification state is being updated concurrently; retry",
        details={"user_id": user_id},
    )


def _ensure_known(db: Session, user_id: str, source_id: str, already: list[str] | None) -> None:
    if source_id in (already or []):
        return
    if source_id not in {item.id for item in collect_sources(db, user_id)}:
        raise ResourceNotFoundError("Notification", source_id)


def get_feed(db: Session, user_id: str, *, now: datetime | None = None) -> list[NotificationView]:
    state = _load_state(db, user_id)
    dismissed = set(state.dismissed_ids or []) if state else set()
    read = set(state.read_ids or []) if state else set()

    views = [
        NotificationView(
            id=item.id,
            title=item.title,
            message=item.message,
            type=item.type,
            read=item.id in read,
            created_at=item.created_at,
            meta=item.meta or None,
        )
        for item in collect_sources(db, user_id, now=now)
        if item.id not in dismissed
    ]
    views.sort(key=lambda view: view.created_at, reverse=True)
    return views


def dismiss(db: Session, user_id: str, source_id: str) -> NotificationMarkResult:
    """Hide a feed item for good. Only ids the user's feed can produce are accepted."""
    existing = _load_state(db, user_id)
    _ensure_known(db, user_id, source_id, existing.dismissed_ids if existing else None)

    def add(state: NotificationState) -> int:
        if source_id in (state.dismissed_ids or []):
            return 0
        state.dismissed_ids = _union(state.dismissed_ids, [source_id])
        return 1

    state, added = _update_state(db, user_id, add)
    if added:
        logger.debug("User %s dismissed notification %s", user_id, source_id)
    return NotificationMarkResult(id=source_id, dismissed=True, read=source_id in (state.read_ids or []))


def mark_read(db: Session, user_id: str, source_id: str) -> NotificationMarkResult:
    existing = _load_state(db, user_id)
    _ensure_known(db, user_id, source_id, existing.read_ids if existing else None)

    def add(state: NotificationState) -> int:
        if source_id in (state.read_ids or []):
            return 0
        state.read_ids = _union(state.read_ids, [source_id])
        return 1

    state, _ = _update_state(db, user_id, add)
    return NotificationMarkResult(
        id=source_id,
        dismissed=source_id in (state.dismissed_ids or []),
        read=True,
    )


def mark_all_read(db: Session, user_id: str, *, now: datetime | None = None) -> int:
    """Mark everything the feed currently shows as read; returns how many ids were added."""
    unread = [view.id for view in get_feed(db, user_id, now=now) if not view.read]
    if not unread:
        return 0

    def add(state: NotificationState) -> int:
        fresh = [item for item in unread if item not in (state.read_ids or [])]
        if fresh:
            state.read_ids = _union(state.read_ids, fresh)
        return len(fresh)

    _, added = _update_state(db, user_id, add)
    logger.info("Marked %d notification(s) read for user %s", added, user_id)
    return added
