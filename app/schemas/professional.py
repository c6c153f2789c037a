from datetime import datetime

from pydantic import BaseModel, Field


class ProfessionalProfileUpdateRequest(BaseModel):
    display_name: str = Field(min_length=2, max_length=120)
    description: str | None = Field(default=None, max_length=500)


class ProfessionalProfileResponse(BaseModel):
    id: int
    user_id: int
    display_name: str
    description: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfessionalSummaryResponse(BaseModel):
    id: int
    display_name: str
    description: str | None
    principal_service_name: str | None = None
