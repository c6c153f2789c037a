from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.security import decode_access_token
from app.db.models import User, UserRole
from app.db.session import get_db
from app.services.category_service import CategoryProvider, DatabaseCategoryProvider

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

NOT_ENOUGH_PERMISSIONS_DETAIL = "Not enough permissions"


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    unauthorized_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        user_id = int(payload.get("sub", ""))
    except (ValueError, TypeError):
        raise unauthorized_exc

    user = db.scalar(select(User).where(User.id == user_id))
    if not user or not user.is_active:
        raise unauthorized_exc
    return user


def require_roles(*roles: UserRole | str) -> Callable[[User], User]:
    allowed_roles = {role.value if isinstance(role, UserRole) else role for role in roles}

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=NOT_ENOUGH_PERMISSIONS_DETAIL,
            )
        return current_user

    return checker


def ensure_can_manage_professional(user: User, professional_id: int) -> None:
    if user.role == UserRole.ADMIN.value:
        return
    if user.role == UserRole.PROFESSIONAL.value and user.professional_id == professional_id:
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=NOT_ENOUGH_PERMISSIONS_DETAIL)


def get_category_provider(db: Session = Depends(get_db)) -> CategoryProvider:
    return DatabaseCategoryProvider(db)
