from decimal import Decimal

import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import func, select

from app.db.models import AvailabilitySchedule, CoverageArea, CoverageLocation, DaySchedule, Specialty
from app.schemas.service_profile import SyncStatus
from app.services import profile_sync_service
from app.services.category_service import DatabaseCategoryProvider
from app.services.profile_sync_service import (
    PROFESSIONAL_NOT_FOUND_DETAIL,
    get_service_profile,
    remove_service_profile,
    synchronize_service_profile,
)
from app.services.profile_validation import (
    CATEGORY_NOT_FOUND_DETAIL,
    DUPLICATE_CATEGORY_DETAIL,
    LOCATION_COUNT_DETAIL,
    MULTIPLE_PRINCIPALS_DETAIL,
    SPECIALTY_COUNT_DETAIL,
    WEEKDAY_DUPLICATE_DETAIL,
    WEEKDAY_INVALID_DETAIL,
    WORK_MODE_REQUIRED_DETAIL,
)
from factories import make_location, make_specialty, profile_request


def _sync(db, professional_id, payload):
    return synchronize_service_profile(
        db=db,
        professional_id=professional_id,
        payload=payload,
        categories=DatabaseCategoryProvider(db),
    )


def _row_counts(db) -> dict[str, int]:
    return {
        "specialties": db.scalar(select(func.count(Specialty.id))),
        "areas": db.scalar(select(func.count(CoverageArea.id))),
        "locations": db.scalar(select(func.count(CoverageLocation.id))),
        "schedules": db.scalar(select(func.count(AvailabilitySchedule.id))),
        "days": db.scalar(select(func.count(DaySchedule.id))),
    }


def test_first_sync_creates_and_second_updates(db_session, categories, professional_id):
    payload = profile_request([make_specialty(categories[0])])

    assert _sync(db_session, professional_id, payload) == SyncStatus.CREATED
    stored_id = db_session.scalar(select(Specialty.id))
    resubmitted = profile_request([make_specialty(categories[0], id=stored_id)])
    assert _sync(db_session, professional_id, resubmitted) == SyncStatus.UPDATED


def test_create_path_ignores_submitted_ids(db_session, categories, professional_id):
    _sync(db_session, professional_id, profile_request([make_specialty(categories[0], id=999)]))

    specialty = db_session.scalar(select(Specialty))
    assert specialty.id != 999


def test_failure_after_specialties_leaves_profile_untouched(db_session, categories, professional_id, monkeypatch):
    _sync(db_session, professional_id, profile_request([make_specialty(categories[0])]))
    stored_id = db_session.scalar(select(Specialty.id))
    before = get_service_profile(db_session, professional_id)

    def broken_area_writer(**_):
        raise RuntimeError("coverage store unavailable")

    monkeypatch.setattr(profile_sync_service, "replace_coverage_area", broken_area_writer)
    changed = profile_request(
        [make_specialty(categories[1]), make_specialty(categories[0], id=stored_id, cost="99.00")],
        locations=[make_location("Cusco")],
    )
    with pytest.raises(RuntimeError):
        _sync(db_session, professional_id, changed)

    db_session.expire_all()
    after = get_service_profile(db_session, professional_id)
    assert after == before


def test_failure_during_first_sync_leaves_no_configuration(db_session, categories, professional_id, monkeypatch):
    def broken_availability_writer(**_):
        raise RuntimeError("schedule store unavailable")

    monkeypatch.setattr(profile_sync_service, "replace_availability", broken_availability_writer)
    payload = profile_request([make_specialty(categories[0]), make_specialty(categories[1])])

    with pytest.raises(RuntimeError):
        _sync(db_session, professional_id, payload)

    db_session.expire_all()
    assert _row_counts(db_session) == {"specialties": 0, "areas": 0, "locations": 0, "schedules": 0, "days": 0}
    assert get_service_profile(db_session, professional_id).configured is False


def test_four_specialties_are_rejected_without_writes(db_session, categories, professional_id):
    payload = profile_request([make_specialty(category_id) for category_id in categories[:4]])

    with pytest.raises(HTTPException) as exc_info:
        _sync(db_session, professional_id, payload)

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == SPECIALTY_COUNT_DETAIL
    assert set(_row_counts(db_session).values()) == {0}


def test_eleven_locations_are_rejected_without_writes(db_session, categories, professional_id):
    payload = profile_request(
        [make_specialty(categories[0])],
        locations=[make_location(f"Department {index}") for index in range(11)],
    )

    with pytest.raises(HTTPException) as exc_info:
        _sync(db_session, professional_id, payload)

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == LOCATION_COUNT_DETAIL
    assert set(_row_counts(db_session).values()) == {0}


def test_rejected_update_keeps_previous_profile(db_session, categories, professional_id):
    _sync(db_session, professional_id, profile_request([make_specialty(categories[0])]))
    before = _row_counts(db_session)

    with pytest.raises(HTTPException):
        _sync(
            db_session,
            professional_id,
            profile_request([make_specialty(categories[0])], locations=[make_location()] * 11),
        )

    assert _row_counts(db_session) == before


@pytest.mark.parametrize(
    ("specialties", "expected_detail"),
    [
        (
            lambda c: [make_specialty(c[0], is_principal=True), make_specialty(c[1], is_principal=True)],
            MULTIPLE_PRINCIPALS_DETAIL,
        ),
        (
            lambda c: [make_specialty(c[0]), make_specialty(c[0], service_name="Other")],
            DUPLICATE_CATEGORY_DETAIL.format(category_id=1),
        ),
        (
            lambda c: [make_specialty(c[4])],
            CATEGORY_NOT_FOUND_DETAIL.format(category_id=5),
        ),
        (
            lambda c: [make_specialty(c[0], work_mode_remote=False, work_mode_onsite=False)],
            WORK_MODE_REQUIRED_DETAIL.format(position=1),
        ),
    ],
)
def test_invalid_specialties_are_rejected(db_session, categories, professional_id, specialties, expected_detail):
    with pytest.raises(HTTPException) as exc_info:
        _sync(db_session, professional_id, profile_request(specialties(categories)))

    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == expected_detail


def test_unknown_and_duplicate_weekdays_are_rejected(db_session, categories, professional_id):
    unknown = profile_request(
        [make_specialty(categories[0])],
        availability={"always_available": False, "day_schedules": [{"weekday": "funday", "shift_type": "8hrs"}]},
    )
    with pytest.raises(HTTPException) as exc_info:
        _sync(db_session, professional_id, unknown)
    assert exc_info.value.detail == WEEKDAY_INVALID_DETAIL.format(weekday="funday")

    duplicate = profile_request(
        [make_specialty(categories[0])],
        availability={
            "always_available": False,
            "day_schedules": [
                {"weekday": "Monday", "shift_type": "8hrs"},
                {"weekday": "monday", "shift_type": "24hrs"},
            ],
        },
    )
    with pytest.raises(HTTPException) as exc_info:
        _sync(db_session, professional_id, duplicate)
    assert exc_info.value.detail == WEEKDAY_DUPLICATE_DETAIL.format(weekday="monday")


def test_unknown_cost_type_fails_schema_validation():
    with pytest.raises(ValidationError):
        profile_request([make_specialty(1, cost_type="week")])


def test_unknown_professional_returns_not_found(db_session, categories):
    with pytest.raises(HTTPException) as exc_info:
        _sync(db_session, 404, profile_request([make_specialty(categories[0])]))

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == PROFESSIONAL_NOT_FOUND_DETAIL


def test_round_trip_returns_submitted_content(db_session, categories, professional_id):
    payload = profile_request(
        [
            make_specialty(categories[1], service_name="Wiring", cost="40.00", cost_type="day"),
            make_specialty(categories[0], service_name="Leaks", is_principal=True, work_mode_remote=True),
        ],
        locations=[
            make_location("Lima", location_type="district", province="Lima", district="Miraflores"),
            make_location("Cusco"),
        ],
        availability={
            "always_available": False,
            "day_schedules": [
                {"weekday": "friday", "shift_type": "8hrs", "start_time": "09:00:00", "end_time": "13:00:00"},
                {"weekday": "monday", "shift_type": "24hrs"},
            ],
        },
    )
    _sync(db_session, professional_id, payload)

    profile = get_service_profile(db_session, professional_id)

    assert profile.configured is True
    assert [(s.service_name, s.cost, s.cost_type.value, s.is_principal, s.order) for s in profile.specialties] == [
        ("Wiring", Decimal("40.00"), "day", False, 1),
        ("Leaks", Decimal("50.00"), "hour", True, 2),
    ]
    assert profile.specialties[1].work_mode_remote is True
    assert [(loc.department, loc.district, loc.order) for loc in profile.coverage_area.locations] == [
        ("Lima", "Miraflores", 1),
        ("Cusco", None, 2),
    ]
    assert [(day.weekday, day.shift_type.value) for day in profile.availability.day_schedules] == [
        ("friday", "8hrs"),
        ("monday", "24hrs"),
    ]
    assert profile.availability.day_schedules[1].start_time is None


def test_unconfigured_profile_is_empty(db_session, professional_id):
    profile = get_service_profile(db_session, professional_id)

    assert profile.configured is False
    assert profile.specialties == []
    assert profile.coverage_area is None
    assert profile.availability is None


def test_remove_deactivates_specialties_and_deletes_area_and_schedule(db_session, categories, professional_id):
    _sync(db_session, professional_id, profile_request([make_specialty(categories[0]), make_specialty(categories[1])]))

    remove_service_profile(db_session, professional_id)

    counts = _row_counts(db_session)
    assert counts == {"specialties": 2, "areas": 0, "locations": 0, "schedules": 0, "days": 0}
    specialties = db_session.scalars(select(Specialty)).all()
    assert all(not specialty.active and specialty.order is None for specialty in specialties)
    assert get_service_profile(db_session, professional_id).configured is False


def test_sync_after_remove_goes_through_create_path(db_session, categories, professional_id):
    _sync(db_session, professional_id, profile_request([make_specialty(categories[0])]))
    remove_service_profile(db_session, professional_id)

    status = _sync(db_session, professional_id, profile_request([make_specialty(categories[0])]))

    assert status == SyncStatus.CREATED
    assert db_session.scalar(select(func.count(Specialty.id)).where(Specialty.active.is_(True))) == 1
