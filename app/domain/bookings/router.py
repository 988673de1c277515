"""Booking router - FastAPI endpoints for the booking lifecycle"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Caller, Identity, get_current_caller, get_current_identity, require_staff
from ...database import get_db
from ...schemas import MessageResponse, Pagination
from ...shared.clock import Clock, get_clock
from ...shared.validators import parse_int_id
from .schemas import (
    BookingCreate,
    BookingCreatedResponse,
    BookingListResponse,
    BookingMutationResponse,
    BookingResponse,
    BookingUpdate,
    DeleteBookingRequest,
    StatusUpdateRequest,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, clock)


@router.post("", response_model=BookingCreatedResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    identity: Identity = Depends(get_current_identity),
    service: BookingService = Depends(get_booking_service),
):
    """Submit a new booking; it always starts as pending"""
    booking = service.create_booking(identity.uid, identity.email, data)
    return BookingCreatedResponse(
        message="Booking created successfully",
        bookingId=booking.id,
        booking=BookingResponse.model_validate(booking),
    )


@router.get("/user/{user_id}", response_model=list[BookingResponse])
async def get_user_bookings(
    user_id: str,
    caller: Caller = Depends(get_current_caller),
    service: BookingService = Depends(get_booking_service),
):
    """A user's active bookings (their own, or anyone's for staff)"""
    bookings = service.list_for_user(caller.uid, user_id, caller.role)
    return [BookingResponse.model_validate(b) for b in bookings]


@router.get("", response_model=BookingListResponse)
async def get_all_bookings(
    status: Optional[str] = Query(None),
    eventType: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    caller: Caller = Depends(require_staff),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings for admins and photographers"""
    bookings, total = service.list_all(caller.role, status, eventType, page, limit)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        pagination=Pagination.build(page, limit, total),
    )


@router.patch("/{booking_id}/status", response_model=BookingMutationResponse)
async def update_booking_status(
    booking_id: str,
    data: StatusUpdateRequest,
    caller: Caller = Depends(require_staff),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.update_status(
        caller.uid, caller.role, parse_int_id(booking_id), data.status, data.reason, data.notes
    )
    return BookingMutationResponse(
        message="Booking status updated successfully",
        booking=BookingResponse.model_validate(booking),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    caller: Caller = Depends(get_current_caller),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_booking(caller.uid, caller.role, parse_int_id(booking_id))
    return BookingResponse.model_validate(booking)


@router.put("/{booking_id}", response_model=BookingMutationResponse)
async def edit_booking(
    booking_id: str,
    data: BookingUpdate,
    caller: Caller = Depends(get_current_caller),
    service: BookingService = Depends(get_booking_service),
):
    """Edit a booking: owners within an hour of creation, admins any time"""
    booking = service.edit_booking(caller.uid, caller.role, parse_int_id(booking_id), data)
    return BookingMutationResponse(
        message="Booking updated successfully",
        booking=BookingResponse.model_validate(booking),
    )


@router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(
    booking_id: str,
    data: Optional[DeleteBookingRequest] = None,
    caller: Caller = Depends(get_current_caller),
    service: BookingService = Depends(get_booking_service),
):
    """Soft-delete a booking; a reason is required"""
    reason = data.deletionReason if data else None
    service.soft_delete(caller.uid, caller.role, parse_int_id(booking_id), reason)
    return MessageResponse(message="Booking deleted successfully")
