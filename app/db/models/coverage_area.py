from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class LocationType(str, Enum):
    DEPARTMENT = "department"
    PROVINCE = "province"
    DISTRICT = "district"


class CoverageArea(Base):
    __tablename__ = "coverage_areas"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    professional_id: Mapped[int] = mapped_column(
        ForeignKey("professional_profiles.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    nationwide: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    professional = relationship("ProfessionalProfile", back_populates="coverage_area")
    locations = relationship(
        "CoverageLocation",
        back_populates="coverage_area",
        cascade="all, delete-orphan",
        order_by="CoverageLocation.order",
    )


class CoverageLocation(Base):
    __tablename__ = "coverage_locations"
    __table_args__ = (
        UniqueConstraint("coverage_area_id", "order", name="uq_coverage_locations_area_order"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    coverage_area_id: Mapped[int] = mapped_column(
        ForeignKey("coverage_areas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location_type: Mapped[str] = mapped_column(String(20), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    province: Mapped[str | None] = mapped_column(String(100), nullable=True)
    district: Mapped[str | None] = mapped_column(String(100), nullable=True)
    order: Mapped[int] = mapped_column(nullable=False)

    coverage_area = relationship("CoverageArea", back_populates="locations")
