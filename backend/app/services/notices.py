from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import PermissionDeniedError, ResourceNotFoundError, ValidationError
from app.db.base import utc_now
from app.models.notice import Notice
from app.models.user import User
from app.services.hierarchy import HierarchyDirectory

logger = logging.getLogger(__name__)


def create_notice(
    db: Session,
    directory: HierarchyDirectory,
    *,
    author: User,
    module_id: str,
    title: str,
    content: str,
) -> Notice:
    cleaned_title = (title or "").strip()
    cleaned_content = (content or "").strip()
    if not cleaned_title or not cleaned_content:
        raise ValidationError("Notice title and content are required")

    module = directory.get_module(module_id)
    if module is None:
        raise ResourceNotFoundError("Module", module_id)
    if module.leader_id != author.id:
        raise PermissionDeniedError(f"Only the leader of {module.code} can post notices for it")

    notice = Notice(
        module_id=module.id,
        module_code=module.code,
        author_id=author.id,
        author_name=author.name,
        title=cleaned_title,
        content=cleaned_content,
        created_at=utc_now(),
    )
    db.add(notice)
    db.flush()
    logger.info("Notice %s posted to %s by %s", notice.id, module.code, author.id)
    return notice


def list_notices(db: Session, *, module_id: str | None = None) -> list[Notice]:
    query = select(Notice)
    if module_id:
        query = query.where(Notice.module_id == module_id)
    return list(db.execute(query.order_by(Notice.created_at.desc(), Notice.id.asc())).scalars())
