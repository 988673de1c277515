"""Booking domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...schemas import BookingStatus, Pagination

# Request field -> bookings column
BOOKING_FIELDS = {
    "eventType": "event_type",
    "packageType": "package_type",
    "eventDate": "event_date",
    "eventTime": "event_time",
    "location": "location",
    "duration": "duration",
    "guestCount": "guest_count",
    "additionalServices": "additional_services",
    "specialRequests": "special_requests",
    "budgetRange": "budget_range",
    "totalAmount": "total_amount",
}


class BookingCreate(BaseModel):
    """Schema for a client submitting a booking"""

    eventType: str
    packageType: str
    eventDate: date
    eventTime: Optional[str] = None
    location: Optional[str] = None
    duration: Optional[float] = None
    guestCount: Optional[int] = None
    additionalServices: list[str] = []
    specialRequests: Optional[str] = None
    budgetRange: Optional[str] = None
    # Taken as submitted; not recomputed from the pricing catalog
    totalAmount: Optional[float] = None

    @field_validator("additionalServices", mode="before")
    @classmethod
    def default_services(cls, v):
        return v or []

    def to_columns(self) -> dict:
        return {BOOKING_FIELDS[name]: value for name, value in self.model_dump().items()}


class BookingUpdate(BaseModel):
    """Partial update; only fields present in the body are written"""

    eventType: Optional[str] = None
    packageType: Optional[str] = None
    eventDate: Optional[date] = None
    eventTime: Optional[str] = None
    location: Optional[str] = None
    duration: Optional[float] = None
    guestCount: Optional[int] = None
    additionalServices: Optional[list[str]] = None
    specialRequests: Optional[str] = None
    budgetRange: Optional[str] = None
    totalAmount: Optional[float] = None

    @field_validator("eventType", "packageType", "eventDate")
    @classmethod
    def required_when_present(cls, v):
        if v is None:
            raise ValueError("cannot be null")
        return v

    def to_columns(self) -> dict:
        return {
            BOOKING_FIELDS[name]: value
            for name, value in self.model_dump(exclude_unset=True).items()
        }


class StatusUpdateRequest(BaseModel):
    # Validated by the booking policy so a bad value is a 400, not a schema error
    status: Optional[str] = None
    reason: Optional[str] = None
    notes: Optional[str] = None


class DeleteBookingRequest(BaseModel):
    deletionReason: Optional[str] = None


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    event_type: str
    package_type: str
    event_date: date
    event_time: Optional[str] = None
    location: Optional[str] = None
    duration: Optional[float] = None
    guest_count: Optional[int] = None
    additional_services: list[str] = []
    special_requests: Optional[str] = None
    budget_range: Optional[str] = None
    total_amount: Optional[float] = None
    status: BookingStatus
    status_reason: Optional[str] = None
    status_notes: Optional[str] = None
    status_updated_at: Optional[datetime] = None
    status_updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    deletion_reason: Optional[str] = None
    deleted_by: Optional[str] = None
    user: Optional[ProfileSummary] = None

    @field_validator("additional_services", mode="before")
    @classmethod
    def default_services(cls, v):
        return v or []


class BookingDetailResponse(BookingResponse):
    """Admin view: also names who last changed the status and who deleted it"""

    status_updater: Optional[ProfileSummary] = None
    deleter: Optional[ProfileSummary] = None


class BookingCreatedResponse(BaseModel):
    message: str
    bookingId: int
    booking: BookingResponse


class BookingMutationResponse(BaseModel):
    message: str
    booking: BookingResponse


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]
    pagination: Pagination


class AdminBookingListResponse(BaseModel):
    bookings: list[BookingResponse]
    total: int
    page: int
    limit: int
    totalPages: int


class BookingStatsResponse(BaseModel):
    total: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    could_not_do: int
    deleted: int
