from datetime import datetime, time
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Time, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class ShiftType(str, Enum):
    STANDARD = "8hrs"
    FULL_DAY = "24hrs"


class AvailabilitySchedule(Base):
    __tablename__ = "availability_schedules"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    professional_id: Mapped[int] = mapped_column(
        ForeignKey("professional_profiles.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    always_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    professional = relationship("ProfessionalProfile", back_populates="availability")
    day_schedules = relationship(
        "DaySchedule",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="DaySchedule.order",
    )


class DaySchedule(Base):
    __tablename__ = "availability_days"
    __table_args__ = (
        UniqueConstraint("schedule_id", "weekday", name="uq_availability_days_schedule_weekday"),
        UniqueConstraint("schedule_id", "order", name="uq_availability_days_schedule_order"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    schedule_id: Mapped[int] = mapped_column(
        ForeignKey("availability_schedules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    weekday: Mapped[str] = mapped_column(String(10), nullable=False)
    shift_type: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    order: Mapped[int] = mapped_column(nullable=False)

    schedule = relationship("AvailabilitySchedule", back_populates="day_schedules")
