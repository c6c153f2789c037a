import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.metrics import PROFILE_SYNC_DURATION, PROFILE_SYNC_TOTAL
from app.db.models import AvailabilitySchedule, CoverageArea, ProfessionalProfile, Specialty
from app.schemas.service_profile import (
    AvailabilityResponse,
    CoverageAreaResponse,
    ServiceProfileRequest,
    ServiceProfileResponse,
    SpecialtyResponse,
    SyncStatus,
)
from app.services.availability_writer import delete_availability, replace_availability
from app.services.category_service import CategoryProvider
from app.services.coverage_area_writer import delete_coverage_area, replace_coverage_area
from app.services.profile_validation import validate_service_profile
from app.services.specialty_reconciler import insert_specialties, list_active_specialties, reconcile_specialties

logger = logging.getLogger(__name__)

PROFESSIONAL_NOT_FOUND_DETAIL = "Professional not found"
PROFILE_LOCK_CONFLICT_DETAIL = "Service profile update in progress. Retry the request."
PG_LOCK_NOT_AVAILABLE_SQLSTATE = "55P03"


def _is_postgresql_session(db: Session) -> bool:
    bind = db.get_bind()
    return bind is not None and bind.dialect.name == "postgresql"


def _is_pg_lock_not_available(exc: OperationalError) -> bool:
    original_error = getattr(exc, "orig", None)
    if original_error is None:
        return False

    sqlstate = getattr(original_error, "sqlstate", None)
    if sqlstate is None:
        sqlstate = getattr(original_error, "pgcode", None)

    return sqlstate == PG_LOCK_NOT_AVAILABLE_SQLSTATE


def lock_professional(db: Session, professional_id: int) -> ProfessionalProfile:
    """Load the professional row, holding a row lock on PostgreSQL until the transaction ends.

    NOWAIT makes a second writer for the same professional fail fast instead of
    interleaving with the first one.
    """
    query = select(ProfessionalProfile).where(ProfessionalProfile.id == professional_id)
    if _is_postgresql_session(db):
        query = query.with_for_update(nowait=True)

    professional = db.scalar(query)
    if not professional:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROFESSIONAL_NOT_FOUND_DETAIL)
    return professional


@contextmanager
def profile_transaction(db: Session, operation: str, professional_id: int) -> Iterator[None]:
    """Commit everything done inside the block, or roll all of it back and re-raise."""
    start = time.perf_counter()
    try:
        yield
        db.commit()
        PROFILE_SYNC_DURATION.labels(operation=operation).observe(time.perf_counter() - start)
    except HTTPException:
        db.rollback()
        PROFILE_SYNC_TOTAL.labels(operation=operation, outcome="rejected").inc()
        raise
    except OperationalError as exc:
        db.rollback()
        if _is_pg_lock_not_available(exc):
            PROFILE_SYNC_TOTAL.labels(operation=operation, outcome="conflict").inc()
            logger.warning("profile_lock_conflict operation=%s professional_id=%s", operation, professional_id)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=PROFILE_LOCK_CONFLICT_DETAIL) from None
        PROFILE_SYNC_TOTAL.labels(operation=operation, outcome="failed").inc()
        logger.exception("profile_rolled_back operation=%s professional_id=%s", operation, professional_id)
        raise
    except Exception:
        db.rollback()
        PROFILE_SYNC_TOTAL.labels(operation=operation, outcome="failed").inc()
        logger.exception("profile_rolled_back operation=%s professional_id=%s", operation, professional_id)
        raise


def has_service_configuration(db: Session, professional_id: int) -> bool:
    active_count = db.scalar(
        select(func.count(Specialty.id)).where(
            Specialty.professional_id == professional_id,
            Specialty.active.is_(True),
        )
    )
    return bool(active_count)


def synchronize_service_profile(
    db: Session,
    professional_id: int,
    payload: ServiceProfileRequest,
    categories: CategoryProvider,
) -> SyncStatus:
    """Write the complete desired service profile of a professional as one unit.

    Without an active configuration the specialties are inserted as new rows;
    otherwise they are reconciled against the stored ones. Coverage area and
    availability are replaced in both cases. Validation runs before the first
    write, and any failure leaves the stored profile exactly as it was.
    """
    with profile_transaction(db, operation="synchronize", professional_id=professional_id):
        lock_professional(db, professional_id)
        configured = has_service_configuration(db, professional_id)
        validate_service_profile(payload, categories)

        if configured:
            reconcile_specialties(db=db, professional_id=professional_id, incoming=payload.specialties)
            sync_status = SyncStatus.UPDATED
        else:
            insert_specialties(db=db, professional_id=professional_id, incoming=payload.specialties)
            sync_status = SyncStatus.CREATED

        replace_coverage_area(db=db, professional_id=professional_id, payload=payload.coverage_area)
        replace_availability(db=db, professional_id=professional_id, payload=payload.availability)

    PROFILE_SYNC_TOTAL.labels(operation="synchronize", outcome=sync_status.value).inc()
    logger.info("profile_synchronized professional_id=%s status=%s", professional_id, sync_status.value)
    return sync_status


def remove_service_profile(db: Session, professional_id: int) -> None:
    with profile_transaction(db, operation="remove", professional_id=professional_id):
        lock_professional(db, professional_id)
        for specialty in list_active_specialties(db, professional_id):
            specialty.deactivate()
        db.flush()
        delete_coverage_area(db=db, professional_id=professional_id)
        delete_availability(db=db, professional_id=professional_id)

    PROFILE_SYNC_TOTAL.labels(operation="remove", outcome=SyncStatus.REMOVED.value).inc()
    logger.info("profile_removed professional_id=%s", professional_id)


def get_professional(db: Session, professional_id: int) -> ProfessionalProfile:
    professional = db.scalar(select(ProfessionalProfile).where(ProfessionalProfile.id == professional_id))
    if not professional:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROFESSIONAL_NOT_FOUND_DETAIL)
    return professional


def get_service_profile(db: Session, professional_id: int) -> ServiceProfileResponse:
    get_professional(db, professional_id)
    specialties = list_active_specialties(db, professional_id)
    area = db.scalar(select(CoverageArea).where(CoverageArea.professional_id == professional_id))
    schedule = db.scalar(
        select(AvailabilitySchedule).where(AvailabilitySchedule.professional_id == professional_id)
    )
    return ServiceProfileResponse(
        professional_id=professional_id,
        configured=bool(specialties),
        specialties=[SpecialtyResponse.model_validate(specialty) for specialty in specialties],
        coverage_area=CoverageAreaResponse.model_validate(area) if area else None,
        availability=AvailabilityResponse.model_validate(schedule) if schedule else None,
    )
