import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.metrics import PROFILE_SYNC_TOTAL
from app.db.models import Specialty
from app.schemas.service_profile import SpecialtyCreateRequest
from app.services.availability_writer import delete_availability
from app.services.category_service import CategoryProvider
from app.services.coverage_area_writer import delete_coverage_area
from app.services.profile_sync_service import get_professional, lock_professional, profile_transaction
from app.services.profile_validation import MAX_SPECIALTIES, validate_category, validate_specialty_fields
from app.services.specialty_reconciler import build_specialty, compact_positions, list_active_specialties

logger = logging.getLogger(__name__)

SPECIALTY_NOT_FOUND_DETAIL = "Specialty not found"
SPECIALTY_LIMIT_DETAIL = f"A professional can offer at most {MAX_SPECIALTIES} specialties. Remove one first."
SPECIALTY_CATEGORY_TAKEN_DETAIL = "The professional already offers a specialty in this category"
PRINCIPAL_ALREADY_SET_DETAIL = "The professional already has a principal specialty. Unmark it first."


def _get_active_specialty(db: Session, professional_id: int, specialty_id: int) -> Specialty:
    specialty = db.scalar(
        select(Specialty).where(
            Specialty.id == specialty_id,
            Specialty.professional_id == professional_id,
            Specialty.active.is_(True),
        )
    )
    if not specialty:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=SPECIALTY_NOT_FOUND_DETAIL)
    return specialty


def list_specialties(db: Session, professional_id: int) -> list[Specialty]:
    get_professional(db, professional_id)
    return list_active_specialties(db, professional_id)


def add_specialty(
    db: Session,
    professional_id: int,
    payload: SpecialtyCreateRequest,
    categories: CategoryProvider,
) -> Specialty:
    with profile_transaction(db, operation="add_specialty", professional_id=professional_id):
        lock_professional(db, professional_id)
        validate_specialty_fields(payload, position=1)
        validate_category(payload.category_id, categories)

        active = list_active_specialties(db, professional_id)
        if len(active) >= MAX_SPECIALTIES:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=SPECIALTY_LIMIT_DETAIL)
        if any(specialty.category_id == payload.category_id for specialty in active):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SPECIALTY_CATEGORY_TAKEN_DETAIL)
        if payload.is_principal and any(specialty.is_principal for specialty in active):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=PRINCIPAL_ALREADY_SET_DETAIL)

        specialty = build_specialty(professional_id=professional_id, payload=payload, order=len(active) + 1)
        if not active:
            specialty.is_principal = True
        db.add(specialty)
        db.flush()

    PROFILE_SYNC_TOTAL.labels(operation="add_specialty", outcome="committed").inc()
    db.refresh(specialty)
    logger.info("specialty_added professional_id=%s specialty_id=%s", professional_id, specialty.id)
    return specialty


def delete_specialty(db: Session, professional_id: int, specialty_id: int) -> None:
    with profile_transaction(db, operation="delete_specialty", professional_id=professional_id):
        lock_professional(db, professional_id)
        specialty = _get_active_specialty(db, professional_id, specialty_id)
        was_principal = specialty.is_principal

        specialty.deactivate()
        specialty.is_principal = False
        db.flush()

        remaining = list_active_specialties(db, professional_id)
        compact_positions(db, remaining)
        if not remaining:
            delete_coverage_area(db=db, professional_id=professional_id)
            delete_availability(db=db, professional_id=professional_id)
        if was_principal and remaining:
            remaining[0].is_principal = True
            db.flush()

    PROFILE_SYNC_TOTAL.labels(operation="delete_specialty", outcome="committed").inc()
    logger.info("specialty_deactivated professional_id=%s specialty_id=%s", professional_id, specialty_id)


def mark_principal(db: Session, professional_id: int, specialty_id: int) -> Specialty:
    with profile_transaction(db, operation="mark_principal", professional_id=professional_id):
        lock_professional(db, professional_id)
        chosen = _get_active_specialty(db, professional_id, specialty_id)
        for specialty in list_active_specialties(db, professional_id):
            specialty.is_principal = specialty.id == chosen.id
        db.flush()

    PROFILE_SYNC_TOTAL.labels(operation="mark_principal", outcome="committed").inc()
    db.refresh(chosen)
    logger.info("specialty_marked_principal professional_id=%s specialty_id=%s", professional_id, specialty_id)
    return chosen
