from app.db.models.availability import AvailabilitySchedule, DaySchedule, ShiftType, Weekday
from app.db.models.coverage_area import CoverageArea, CoverageLocation, LocationType
from app.db.models.professional_profile import ProfessionalProfile
from app.db.models.service_category import ServiceCategory
from app.db.models.specialty import CostType, Specialty
from app.db.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "ProfessionalProfile",
    "ServiceCategory",
    "Specialty",
    "CostType",
    "CoverageArea",
    "CoverageLocation",
    "LocationType",
    "AvailabilitySchedule",
    "DaySchedule",
    "ShiftType",
    "Weekday",
]
