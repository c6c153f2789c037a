"""Checks run on a desired service profile before anything is written."""

from collections.abc import Sequence

from fastapi import HTTPException, status

from app.db.models import LocationType, ShiftType, Weekday
from app.schemas.service_profile import (
    AvailabilityPayload,
    CoverageAreaPayload,
    ServiceProfileRequest,
    SpecialtyCreateRequest,
    SpecialtyPayload,
)
from app.services.availability_writer import normalize_weekday, resolve_shift_times
from app.services.category_service import CategoryProvider

MIN_SPECIALTIES = 1
MAX_SPECIALTIES = 3
MIN_LOCATIONS = 1
MAX_LOCATIONS = 10
MAX_DAY_SCHEDULES = len(Weekday)

SPECIALTY_COUNT_DETAIL = f"A service profile requires between {MIN_SPECIALTIES} and {MAX_SPECIALTIES} specialties"
SERVICE_NAME_REQUIRED_DETAIL = "Specialty {position} must have a service name"
WORK_MODE_REQUIRED_DETAIL = "Specialty {position} must be offered remotely, on site, or both"
MULTIPLE_PRINCIPALS_DETAIL = "Only one specialty can be marked as principal"
DUPLICATE_SPECIALTY_ID_DETAIL = "Specialty {specialty_id} is submitted more than once"
DUPLICATE_CATEGORY_DETAIL = "Category {category_id} is submitted more than once"
CATEGORY_NOT_FOUND_DETAIL = "Service category {category_id} does not exist or is inactive"
LOCATION_COUNT_DETAIL = (
    f"A coverage area that is not nationwide requires between {MIN_LOCATIONS} and {MAX_LOCATIONS} locations"
)
LOCATION_INVALID_DETAIL = "Location {position} must name a department and its {location_type}"
DAY_SCHEDULES_REQUIRED_DETAIL = "At least one day schedule is required when not always available"
DAY_SCHEDULE_COUNT_DETAIL = f"No more than {MAX_DAY_SCHEDULES} day schedules can be submitted"
WEEKDAY_INVALID_DETAIL = "Unknown weekday '{weekday}'"
WEEKDAY_DUPLICATE_DETAIL = "Weekday '{weekday}' is scheduled more than once"
SHIFT_TIMES_INVALID_DETAIL = "Schedule for {weekday} needs a start time before its end time"

_WEEKDAYS = {weekday.value for weekday in Weekday}


def _reject(detail: str) -> None:
    raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


def validate_specialty_fields(specialty: SpecialtyCreateRequest, position: int) -> None:
    if not specialty.service_name.strip():
        _reject(SERVICE_NAME_REQUIRED_DETAIL.format(position=position))
    if not (specialty.work_mode_remote or specialty.work_mode_onsite):
        _reject(WORK_MODE_REQUIRED_DETAIL.format(position=position))


def validate_category(category_id: int, categories: CategoryProvider) -> None:
    if not categories.category_exists(category_id):
        _reject(CATEGORY_NOT_FOUND_DETAIL.format(category_id=category_id))


def validate_specialties(specialties: Sequence[SpecialtyPayload], categories: CategoryProvider) -> None:
    if not MIN_SPECIALTIES <= len(specialties) <= MAX_SPECIALTIES:
        _reject(SPECIALTY_COUNT_DETAIL)

    for position, specialty in enumerate(specialties, start=1):
        validate_specialty_fields(specialty, position)

    if sum(1 for specialty in specialties if specialty.is_principal) > 1:
        _reject(MULTIPLE_PRINCIPALS_DETAIL)

    seen_ids: set[int] = set()
    seen_categories: set[int] = set()
    for specialty in specialties:
        if specialty.id:
            if specialty.id in seen_ids:
                _reject(DUPLICATE_SPECIALTY_ID_DETAIL.format(specialty_id=specialty.id))
            seen_ids.add(specialty.id)
        if specialty.category_id in seen_categories:
            _reject(DUPLICATE_CATEGORY_DETAIL.format(category_id=specialty.category_id))
        seen_categories.add(specialty.category_id)

    for category_id in seen_categories:
        validate_category(category_id, categories)


def validate_coverage_area(area: CoverageAreaPayload) -> None:
    if area.nationwide:
        return

    if not MIN_LOCATIONS <= len(area.locations) <= MAX_LOCATIONS:
        _reject(LOCATION_COUNT_DETAIL)

    for position, location in enumerate(area.locations, start=1):
        required = {
            LocationType.DEPARTMENT: location.department,
            LocationType.PROVINCE: location.province,
            LocationType.DISTRICT: location.district,
        }[location.location_type]
        if not location.department.strip() or not (required and required.strip()):
            _reject(LOCATION_INVALID_DETAIL.format(position=position, location_type=location.location_type.value))


def validate_availability(schedule: AvailabilityPayload) -> None:
    if schedule.always_available:
        return

    if not schedule.day_schedules:
        _reject(DAY_SCHEDULES_REQUIRED_DETAIL)
    if len(schedule.day_schedules) > MAX_DAY_SCHEDULES:
        _reject(DAY_SCHEDULE_COUNT_DETAIL)

    seen: set[str] = set()
    for day in schedule.day_schedules:
        weekday = normalize_weekday(day.weekday)
        if weekday not in _WEEKDAYS:
            _reject(WEEKDAY_INVALID_DETAIL.format(weekday=day.weekday))
        if weekday in seen:
            _reject(WEEKDAY_DUPLICATE_DETAIL.format(weekday=weekday))
        seen.add(weekday)

        if day.shift_type == ShiftType.STANDARD:
            start_time, end_time = resolve_shift_times(day)
            if start_time is None or end_time is None or start_time >= end_time:
                _reject(SHIFT_TIMES_INVALID_DETAIL.format(weekday=weekday))


def validate_service_profile(payload: ServiceProfileRequest, categories: CategoryProvider) -> None:
    validate_specialties(payload.specialties, categories)
    validate_coverage_area(payload.coverage_area)
    validate_availability(payload.availability)
