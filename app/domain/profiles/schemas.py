"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...schemas import Role
from ...shared.validators import validate_email, validate_phone
from ..bookings.schemas import BookingResponse


class ProfileUpsert(BaseModel):
    """Schema for a user creating or updating their own profile"""

    displayName: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v:
            return validate_phone(v)
        return v


class RoleUpdate(BaseModel):
    role: Optional[str] = None


class StaffCreate(BaseModel):
    """Grant a staff role to an identity-provider account"""

    uid: str
    email: str
    displayName: str
    role: str = Role.ADMIN.value

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    display_name: Optional[str] = None
    role: Role
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileListResponse(BaseModel):
    users: list[ProfileResponse]
    total: int
    page: int
    limit: int
    totalPages: int


class UserDetailResponse(BaseModel):
    user: ProfileResponse
    bookings: list[BookingResponse]


class StaffCreatedResponse(BaseModel):
    message: str
    admin: ProfileResponse
