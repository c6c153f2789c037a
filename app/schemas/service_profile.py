from datetime import datetime, time
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from app.db.models import CostType, LocationType, ShiftType


class SyncStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"


class SpecialtyCreateRequest(BaseModel):
    category_id: int = Field(gt=0)
    service_name: str = Field(max_length=150)
    description: str | None = Field(default=None, max_length=1000)
    includes_materials: bool = False
    cost: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    cost_type: CostType
    is_principal: bool = False
    work_mode_remote: bool = False
    work_mode_onsite: bool = True


class SpecialtyPayload(SpecialtyCreateRequest):
    # None or 0 means the specialty has not been stored yet.
    id: int | None = Field(default=None, ge=0)


class LocationPayload(BaseModel):
    location_type: LocationType
    department: str = Field(max_length=100)
    province: str | None = Field(default=None, max_length=100)
    district: str | None = Field(default=None, max_length=100)


class CoverageAreaPayload(BaseModel):
    nationwide: bool = False
    locations: list[LocationPayload] = Field(default_factory=list)


class DaySchedulePayload(BaseModel):
    weekday: str = Field(max_length=20)
    shift_type: ShiftType
    start_time: time | None = None
    end_time: time | None = None


class AvailabilityPayload(BaseModel):
    always_available: bool = False
    day_schedules: list[DaySchedulePayload] = Field(default_factory=list)


class ServiceProfileRequest(BaseModel):
    specialties: list[SpecialtyPayload]
    coverage_area: CoverageAreaPayload
    availability: AvailabilityPayload


class SpecialtyResponse(BaseModel):
    id: int
    professional_id: int
    category_id: int
    service_name: str
    description: str | None
    includes_materials: bool
    cost: Decimal
    cost_type: CostType
    is_principal: bool
    order: int | None
    work_mode_remote: bool
    work_mode_onsite: bool
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LocationResponse(BaseModel):
    id: int
    location_type: LocationType
    department: str
    province: str | None
    district: str | None
    order: int

    model_config = {"from_attributes": True}


class CoverageAreaResponse(BaseModel):
    id: int
    nationwide: bool
    locations: list[LocationResponse]

    model_config = {"from_attributes": True}


class DayScheduleResponse(BaseModel):
    id: int
    weekday: str
    shift_type: ShiftType
    start_time: time | None
    end_time: time | None
    order: int

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    id: int
    always_available: bool
    day_schedules: list[DayScheduleResponse]

    model_config = {"from_attributes": True}


class ServiceProfileResponse(BaseModel):
    professional_id: int
    configured: bool
    specialties: list[SpecialtyResponse]
    coverage_area: CoverageAreaResponse | None
    availability: AvailabilityResponse | None


class ServiceProfileSyncResponse(BaseModel):
    professional_id: int
    status: SyncStatus
    profile: ServiceProfileResponse | None = None
