"""Identity-preserving writes of a professional's specialty list.

Specialties are reconciled rather than replaced because other records may
reference a specialty id. Resubmitted ids are updated in place, new entries are
inserted, and stored specialties missing from the submission are deactivated
and kept as history.
"""

import logging
from collections.abc import Sequence

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import Specialty
from app.schemas.service_profile import SpecialtyCreateRequest, SpecialtyPayload

logger = logging.getLogger(__name__)

FOREIGN_SPECIALTY_DETAIL = "Specialty {specialty_id} does not belong to this professional"


def _apply_payload(specialty: Specialty, payload: SpecialtyCreateRequest) -> None:
    description = payload.description.strip() if payload.description else None
    specialty.category_id = payload.category_id
    specialty.service_name = payload.service_name.strip()
    specialty.description = description or None
    specialty.includes_materials = payload.includes_materials
    specialty.cost = payload.cost
    specialty.cost_type = payload.cost_type.value
    specialty.is_principal = payload.is_principal
    specialty.work_mode_remote = payload.work_mode_remote
    specialty.work_mode_onsite = payload.work_mode_onsite


def build_specialty(professional_id: int, payload: SpecialtyCreateRequest, order: int) -> Specialty:
    specialty = Specialty(professional_id=professional_id, order=order, active=True)
    _apply_payload(specialty, payload)
    return specialty


def ensure_principal(specialties: Sequence[Specialty]) -> None:
    if specialties and not any(specialty.is_principal for specialty in specialties):
        specialties[0].is_principal = True


def compact_positions(db: Session, specialties: Sequence[Specialty]) -> None:
    """Renumber ``specialties`` 1..n in list order without tripping the order unique key."""
    for specialty in specialties:
        specialty.order = None
    db.flush()
    for position, specialty in enumerate(specialties, start=1):
        specialty.order = position
    db.flush()


def list_active_specialties(db: Session, professional_id: int) -> list[Specialty]:
    return list(
        db.scalars(
            select(Specialty)
            .where(Specialty.professional_id == professional_id, Specialty.active.is_(True))
            .order_by(Specialty.order, Specialty.id)
        ).all()
    )


def insert_specialties(
    db: Session,
    professional_id: int,
    incoming: Sequence[SpecialtyPayload],
) -> list[Specialty]:
    """Plain insert used when the professional has no active configuration.

    Submitted ids are ignored: every entry becomes a new row.
    """
    specialties = [
        build_specialty(professional_id=professional_id, payload=payload, order=position)
        for position, payload in enumerate(incoming, start=1)
    ]
    ensure_principal(specialties)
    db.add_all(specialties)
    db.flush()
    return specialties


def reconcile_specialties(
    db: Session,
    professional_id: int,
    incoming: Sequence[SpecialtyPayload],
) -> list[Specialty]:
    stored = {
        specialty.id: specialty
        for specialty in db.scalars(select(Specialty).where(Specialty.professional_id == professional_id)).all()
    }
    incoming_ids = {payload.id for payload in incoming if payload.id}

    foreign_ids = sorted(incoming_ids - stored.keys())
    if foreign_ids:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=FOREIGN_SPECIALTY_DETAIL.format(specialty_id=foreign_ids[0]),
        )

    deactivated = 0
    for specialty_id, specialty in stored.items():
        if specialty.active and specialty_id not in incoming_ids:
            specialty.deactivate()
            deactivated += 1

    # Kept rows give up their positions first so a reordering never collides.
    for specialty_id in incoming_ids:
        stored[specialty_id].order = None
    db.flush()

    specialties: list[Specialty] = []
    for position, payload in enumerate(incoming, start=1):
        if payload.id:
            specialty = stored[payload.id]
            _apply_payload(specialty, payload)
            specialty.active = True
            specialty.order = position
        else:
            specialty = build_specialty(professional_id=professional_id, payload=payload, order=position)
            db.add(specialty)
        specialties.append(specialty)

    ensure_principal(specialties)
    db.flush()

    logger.info(
        "specialties_reconciled professional_id=%s kept=%s inserted=%s deactivated=%s",
        professional_id,
        len(incoming_ids),
        len(specialties) - len(incoming_ids),
        deactivated,
    )
    return specialties
