from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.rate_limiter import enforce_rate_limit
from app.db.session import get_db
from app.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from app.schemas.user import UserResponse
from app.services.auth_service import login_user, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _client_key(endpoint: str, request: Request) -> str:
    client_ip = request.client.host if request.client else "unknown"
    return f"{endpoint}:{client_ip}"


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> UserResponse:
    enforce_rate_limit(
        key=_client_key("register", request),
        limit=settings.auth_register_max_attempts,
        window_seconds=settings.auth_rate_limit_window_seconds,
    )
    user = register_user(payload=payload, db=db)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> TokenResponse:
    enforce_rate_limit(
        key=_client_key("login", request),
        limit=settings.auth_login_max_attempts,
        window_seconds=settings.auth_rate_limit_window_seconds,
    )
    return login_user(payload=payload, db=db)
