from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_roles
from app.api.pagination import CategoryFilterParam, LimitParam, LocationFilterParam, OffsetParam
from app.db.models import ProfessionalProfile, User, UserRole
from app.db.session import get_db
from app.schemas.professional import (
    ProfessionalProfileResponse,
    ProfessionalProfileUpdateRequest,
    ProfessionalSummaryResponse,
)
from app.services.professional_service import search_professionals, update_professional_profile

router = APIRouter(prefix="/professionals", tags=["professionals"])


@router.get("", response_model=list[ProfessionalSummaryResponse], status_code=status.HTTP_200_OK)
def list_professionals(
    category_id: CategoryFilterParam = None,
    location: LocationFilterParam = None,
    limit: LimitParam = 20,
    offset: OffsetParam = 0,
    db: Session = Depends(get_db),
) -> list[ProfessionalSummaryResponse]:
    return search_professionals(db=db, category_id=category_id, location=location, limit=limit, offset=offset)


@router.get("/me", response_model=ProfessionalProfileResponse, status_code=status.HTTP_200_OK)
def get_my_professional_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfessionalProfileResponse:
    profile = db.scalar(select(ProfessionalProfile).where(ProfessionalProfile.user_id == current_user.id))
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professional profile not found")
    return ProfessionalProfileResponse.model_validate(profile)


@router.put("/me", response_model=ProfessionalProfileResponse, status_code=status.HTTP_200_OK)
def update_my_professional_profile(
    payload: ProfessionalProfileUpdateRequest,
    current_user: User = Depends(require_roles(UserRole.PROFESSIONAL)),
    db: Session = Depends(get_db),
) -> ProfessionalProfileResponse:
    profile = update_professional_profile(db=db, user=current_user, payload=payload)
    return ProfessionalProfileResponse.model_validate(profile)
