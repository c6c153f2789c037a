from pydantic import BaseModel, EmailStr, Field, field_validator

from app.db.models.user import UserRole


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    role: UserRole = UserRole.CLIENT
    display_name: str | None = Field(default=None, min_length=2, max_length=120)

    @field_validator("role")
    @classmethod
    def forbid_admin_self_registration(cls, value: UserRole) -> UserRole:
        if value == UserRole.ADMIN:
            raise ValueError("admin accounts cannot be self-registered")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
