from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_hierarchy, require_roles
from app.models.user import User, UserRole
from app.schemas.notice import NoticeCreate, NoticeOut
from app.services import notices
from app.services.hierarchy import HierarchyDirectory

router = APIRouter()


@router.get("/notices", response_model=list[NoticeOut])
def list_notices(
    module_id: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[NoticeOut]:
    return notices.list_notices(db, module_id=module_id)


@router.post("/notices", response_model=NoticeOut, status_code=status.HTTP_201_CREATED)
def create_notice(
    payload: NoticeCreate,
    current_user: User = Depends(require_roles(UserRole.lecturer)),
    db: Session = Depends(get_db),
    directory: HierarchyDirectory = Depends(get_hierarchy),
) -> NoticeOut:
    notice = notices.create_notice(
        db,
        directory,
        author=current_user,
        module_id=payload.module_id,
        title=payload.title,
        content=payload.content,
    )
    db.commit()
    db.refresh(notice)
    return notice
