from datetime import time

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import AvailabilitySchedule, DaySchedule, ShiftType
from app.schemas.service_profile import AvailabilityPayload, DaySchedulePayload

STANDARD_SHIFT_START = time(8, 0)
STANDARD_SHIFT_END = time(17, 0)


def normalize_weekday(value: str) -> str:
    return value.strip().lower()


def resolve_shift_times(day: DaySchedulePayload) -> tuple[time | None, time | None]:
    if day.shift_type == ShiftType.FULL_DAY:
        return None, None
    if day.start_time is None and day.end_time is None:
        return STANDARD_SHIFT_START, STANDARD_SHIFT_END
    return day.start_time, day.end_time


def delete_availability(db: Session, professional_id: int) -> bool:
    schedule = db.scalar(
        select(AvailabilitySchedule).where(AvailabilitySchedule.professional_id == professional_id)
    )
    if schedule is None:
        return False

    db.delete(schedule)
    db.flush()
    return True


def replace_availability(db: Session, professional_id: int, payload: AvailabilityPayload) -> AvailabilitySchedule:
    delete_availability(db=db, professional_id=professional_id)

    schedule = AvailabilitySchedule(professional_id=professional_id, always_available=payload.always_available)
    if not payload.always_available:
        days = []
        for position, day in enumerate(payload.day_schedules, start=1):
            start_time, end_time = resolve_shift_times(day)
            days.append(
                DaySchedule(
                    weekday=normalize_weekday(day.weekday),
                    shift_type=day.shift_type.value,
                    start_time=start_time,
                    end_time=end_time,
                    order=position,
                )
            )
        schedule.day_schedules = days
    db.add(schedule)
    db.flush()
    return schedule
