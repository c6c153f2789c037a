from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import ensure_can_manage_professional, get_category_provider, require_roles
from app.db.models import User, UserRole
from app.db.session import get_db
from app.schemas.service_profile import (
    ServiceProfileRequest,
    ServiceProfileResponse,
    ServiceProfileSyncResponse,
    SpecialtyCreateRequest,
    SpecialtyResponse,
    SyncStatus,
)
from app.services.category_service import CategoryProvider
from app.services.profile_sync_service import (
    get_service_profile,
    remove_service_profile,
    synchronize_service_profile,
)
from app.services.specialty_service import add_specialty, delete_specialty, list_specialties, mark_principal

router = APIRouter(prefix="/professionals/{professional_id}", tags=["services"])

manage_roles = require_roles(UserRole.PROFESSIONAL, UserRole.ADMIN)


def _synchronize(
    professional_id: int,
    payload: ServiceProfileRequest,
    response: Response,
    current_user: User,
    db: Session,
    categories: CategoryProvider,
) -> ServiceProfileSyncResponse:
    ensure_can_manage_professional(current_user, professional_id)
    sync_status = synchronize_service_profile(
        db=db,
        professional_id=professional_id,
        payload=payload,
        categories=categories,
    )
    if sync_status == SyncStatus.CREATED:
        response.status_code = status.HTTP_201_CREATED
    return ServiceProfileSyncResponse(
        professional_id=professional_id,
        status=sync_status,
        profile=get_service_profile(db=db, professional_id=professional_id),
    )


@router.get("/services", response_model=ServiceProfileResponse, status_code=status.HTTP_200_OK)
def get_services(professional_id: int, db: Session = Depends(get_db)) -> ServiceProfileResponse:
    return get_service_profile(db=db, professional_id=professional_id)


@router.post("/services", response_model=ServiceProfileSyncResponse, status_code=status.HTTP_200_OK)
def create_services(
    professional_id: int,
    payload: ServiceProfileRequest,
    response: Response,
    current_user: User = Depends(manage_roles),
    db: Session = Depends(get_db),
    categories: CategoryProvider = Depends(get_category_provider),
) -> ServiceProfileSyncResponse:
    return _synchronize(professional_id, payload, response, current_user, db, categories)


@router.put("/services", response_model=ServiceProfileSyncResponse, status_code=status.HTTP_200_OK)
def update_services(
    professional_id: int,
    payload: ServiceProfileRequest,
    response: Response,
    current_user: User = Depends(manage_roles),
    db: Session = Depends(get_db),
    categories: CategoryProvider = Depends(get_category_provider),
) -> ServiceProfileSyncResponse:
    return _synchronize(professional_id, payload, response, current_user, db, categories)


@router.delete("/services", response_model=ServiceProfileSyncResponse, status_code=status.HTTP_200_OK)
def delete_services(
    professional_id: int,
    current_user: User = Depends(manage_roles),
    db: Session = Depends(get_db),
) -> ServiceProfileSyncResponse:
    ensure_can_manage_professional(current_user, professional_id)
    remove_service_profile(db=db, professional_id=professional_id)
    return ServiceProfileSyncResponse(professional_id=professional_id, status=SyncStatus.REMOVED)


@router.get("/specialties", response_model=list[SpecialtyResponse], status_code=status.HTTP_200_OK)
def get_specialties(professional_id: int, db: Session = Depends(get_db)) -> list[SpecialtyResponse]:
    specialties = list_specialties(db=db, professional_id=professional_id)
    return [SpecialtyResponse.model_validate(specialty) for specialty in specialties]


@router.post("/specialties", response_model=SpecialtyResponse, status_code=status.HTTP_201_CREATED)
def create_specialty(
    professional_id: int,
    payload: SpecialtyCreateRequest,
    current_user: User = Depends(manage_roles),
    db: Session = Depends(get_db),
    categories: CategoryProvider = Depends(get_category_provider),
) -> SpecialtyResponse:
    ensure_can_manage_professional(current_user, professional_id)
    specialty = add_specialty(db=db, professional_id=professional_id, payload=payload, categories=categories)
    return SpecialtyResponse.model_validate(specialty)


@router.delete("/specialties/{specialty_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_specialty(
    professional_id: int,
    specialty_id: int,
    current_user: User = Depends(manage_roles),
    db: Session = Depends(get_db),
) -> Response:
    ensure_can_manage_professional(current_user, professional_id)
    delete_specialty(db=db, professional_id=professional_id, specialty_id=specialty_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/specialties/{specialty_id}/principal",
    response_model=SpecialtyResponse,
    status_code=status.HTTP_200_OK,
)
def set_principal_specialty(
    professional_id: int,
    specialty_id: int,
    current_user: User = Depends(manage_roles),
    db: Session = Depends(get_db),
) -> SpecialtyResponse:
    ensure_can_manage_professional(current_user, professional_id)
    specialty = mark_principal(db=db, professional_id=professional_id, specialty_id=specialty_id)
    return SpecialtyResponse.model_validate(specialty)
