from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Session

from app.db.models import CoverageArea, CoverageLocation, ProfessionalProfile, Specialty, User
from app.schemas.professional import ProfessionalProfileUpdateRequest, ProfessionalSummaryResponse


def get_or_create_professional_profile(db: Session, user: User) -> ProfessionalProfile:
    profile = db.scalar(select(ProfessionalProfile).where(ProfessionalProfile.user_id == user.id))
    if profile:
        return profile

    profile = ProfessionalProfile(
        user_id=user.id,
        display_name=user.email.split("@")[0],
        description=None,
    )
    db.add(profile)
    db.flush()
    return profile


def update_professional_profile(
    db: Session,
    user: User,
    payload: ProfessionalProfileUpdateRequest,
) -> ProfessionalProfile:
    profile = get_or_create_professional_profile(db=db, user=user)
    profile.display_name = payload.display_name.strip()
    profile.description = payload.description.strip() if payload.description else None
    db.commit()
    db.refresh(profile)
    return profile


def search_professionals(
    db: Session,
    category_id: int | None,
    location: str | None,
    limit: int,
    offset: int,
) -> list[ProfessionalSummaryResponse]:
    """Professionals with an active service configuration matching the filters.

    ``location`` is matched case-insensitively against the department, province
    and district of each coverage location. Nationwide professionals match any
    location.
    """
    offered = select(Specialty.id).where(
        Specialty.professional_id == ProfessionalProfile.id,
        Specialty.active.is_(True),
    )
    if category_id is not None:
        offered = offered.where(Specialty.category_id == category_id)

    query = select(ProfessionalProfile).where(exists(offered))

    if location and location.strip():
        term = location.strip()
        location_match = select(CoverageLocation.id).where(
            CoverageLocation.coverage_area_id == CoverageArea.id,
            or_(
                CoverageLocation.department.icontains(term, autoescape=True),
                CoverageLocation.province.icontains(term, autoescape=True),
                CoverageLocation.district.icontains(term, autoescape=True),
            ),
        )
        covered = select(CoverageArea.id).where(
            CoverageArea.professional_id == ProfessionalProfile.id,
            or_(CoverageArea.nationwide.is_(True), exists(location_match)),
        )
        query = query.where(exists(covered))

    professionals = db.scalars(query.order_by(ProfessionalProfile.id).limit(limit).offset(offset)).all()
    if not professionals:
        return []

    principal_names = dict(
        db.execute(
            select(Specialty.professional_id, Specialty.service_name).where(
                Specialty.professional_id.in_([professional.id for professional in professionals]),
                Specialty.active.is_(True),
                Specialty.is_principal.is_(True),
            )
        ).all()
    )
    return [
        ProfessionalSummaryResponse(
            id=professional.id,
            display_name=professional.display_name,
            description=professional.description,
            principal_service_name=principal_names.get(professional.id),
        )
        for professional in professionals
    ]
