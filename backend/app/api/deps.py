from collections.abc import Callable, Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.security import decode_token
from app.db.session import SessionLocal
from app.models.user import AdminType, User, UserRole
from app.services.hierarchy import HierarchyDirectory, SqlHierarchyDirectory

security = HTTPBearer()

# Admin types allowed to act as medical officer (decide, suggest, forward).
REVIEW_ADMIN_TYPES = (AdminType.medical_officer, AdminType.super_admin)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_hierarchy(db: Session = Depends(get_db)) -> HierarchyDirectory:
    return SqlHierarchyDirectory(db)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(detail: str = "Insufficient permissions") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    try:
        user_id = decode_token(credentials.credentials).get("sub")
    except JWTError as exc:
        raise _unauthorized() from exc

    user = db.get(User, user_id) if user_id else None
    if user is None:
        raise _unauthorized()
    if not user.is_active:
        raise _forbidden("User account is inactive")
    return user


def require_roles(*roles: UserRole) -> Callable[[User], User]:
    allowed = frozenset(roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise _forbidden()
        return current_user

    return role_checker


def require_admin_types(*admin_types: AdminType) -> Callable[[User], User]:
    """Role gate for admins that also checks the admin sub-type."""
    allowed = frozenset(admin_types)

    def admin_checker(current_user: User = Depends(require_roles(UserRole.admin))) -> User:
        if current_user.admin_type not in allowed:
            raise _forbidden()
        return current_user

    return admin_checker
