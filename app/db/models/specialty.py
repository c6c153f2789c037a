from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class CostType(str, Enum):
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"


class Specialty(Base):
    __tablename__ = "professional_specialties"
    # NULL orders (inactive rows) never collide.
    __table_args__ = (
        UniqueConstraint("professional_id", "order", name="uq_specialties_professional_order"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    professional_id: Mapped[int] = mapped_column(
        ForeignKey("professional_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("service_categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    service_name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    includes_materials: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    cost_type: Mapped[str] = mapped_column(String(10), nullable=False)
    is_principal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order: Mapped[int | None] = mapped_column(nullable=True)
    work_mode_remote: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    work_mode_onsite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    professional = relationship("ProfessionalProfile", back_populates="specialties")
    category = relationship("ServiceCategory")

    def deactivate(self) -> None:
        self.active = False
        self.order = None
