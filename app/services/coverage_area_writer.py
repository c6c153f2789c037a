from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import CoverageArea, CoverageLocation
from app.schemas.service_profile import CoverageAreaPayload


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def delete_coverage_area(db: Session, professional_id: int) -> bool:
    area = db.scalar(select(CoverageArea).where(CoverageArea.professional_id == professional_id))
    if area is None:
        return False

    db.delete(area)
    # Deletes must reach the store before the replacement row hits the professional_id unique key.
    db.flush()
    return True


def replace_coverage_area(db: Session, professional_id: int, payload: CoverageAreaPayload) -> CoverageArea:
    """Physically replace the professional's coverage area and its locations.

    Locations are only written when the area is not nationwide; their order is
    regenerated from the submitted list. Location counts are validated by the
    caller.
    """
    delete_coverage_area(db=db, professional_id=professional_id)

    area = CoverageArea(professional_id=professional_id, nationwide=payload.nationwide)
    if not payload.nationwide:
        area.locations = [
            CoverageLocation(
                location_type=location.location_type.value,
                department=location.department.strip(),
                province=_clean(location.province),
                district=_clean(location.district),
                order=position,
            )
            for position, location in enumerate(payload.locations, start=1)
        ]
    db.add(area)
    db.flush()
    return area
