from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.models import ProfessionalProfile, User, UserRole
from app.schemas.auth import LoginRequest, RegisterRequest, TokenResponse

EMAIL_TAKEN_DETAIL = "User with this email already exists"
INVALID_CREDENTIALS_DETAIL = "Invalid email or password"


def register_user(payload: RegisterRequest, db: Session) -> User:
    email = payload.email.lower()
    existing_user = db.scalar(select(User).where(User.email == email))
    if existing_user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EMAIL_TAKEN_DETAIL)

    role = payload.role.value if isinstance(payload.role, UserRole) else payload.role
    user = User(email=email, hashed_password=get_password_hash(payload.password), role=role)
    if role == UserRole.PROFESSIONAL.value:
        user.professional_profile = ProfessionalProfile(
            display_name=payload.display_name or email.split("@")[0],
            description=None,
        )

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=EMAIL_TAKEN_DETAIL) from None
    db.refresh(user)
    return user


def login_user(payload: LoginRequest, db: Session) -> TokenResponse:
    email = payload.email.lower()
    user = db.scalar(select(User).where(User.email == email))
    if not user or not user.is_active or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS_DETAIL)

    extra_claims = {"email": user.email}
    if user.professional_id is not None:
        extra_claims["professional_id"] = user.professional_id
    token = create_access_token(subject=str(user.id), role=user.role, extra_claims=extra_claims)
    return TokenResponse(access_token=token)
