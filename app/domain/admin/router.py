"""Admin back-office router - every route here requires the admin role"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...auth import Caller, require_admin
from ...shared.validators import parse_int_id
from ..bookings.router import get_booking_service
from ..bookings.schemas import (
    AdminBookingListResponse,
    BookingDetailResponse,
    BookingMutationResponse,
    BookingResponse,
    BookingStatsResponse,
    StatusUpdateRequest,
)
from ..bookings.service import BookingService
from ..profiles.router import get_profile_service
from ..profiles.schemas import (
    ProfileListResponse,
    ProfileResponse,
    StaffCreate,
    StaffCreatedResponse,
    UserDetailResponse,
)
from ..profiles.service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit


# ============================================================================
# BOOKINGS
# ============================================================================


@router.get("/bookings", response_model=AdminBookingListResponse)
async def get_all_bookings(
    status: Optional[str] = Query(None),
    eventType: Optional[str] = Query(None),
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    caller: Caller = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings with owner details, filterable by status, type and event date"""
    bookings, total = service.admin_list(
        caller.role, status, eventType, startDate, endDate, page, limit
    )
    return AdminBookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=total,
        page=page,
        limit=limit,
        totalPages=_total_pages(total, limit),
    )


@router.get("/stats", response_model=BookingStatsResponse)
async def get_booking_stats(
    caller: Caller = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    return BookingStatsResponse(**service.get_stats(caller.role))


@router.get("/bookings/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: str,
    caller: Caller = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Full booking detail including who changed its status and who deleted it"""
    booking = service.admin_get(caller.role, parse_int_id(booking_id))
    return BookingDetailResponse.model_validate(booking)


@router.patch("/bookings/{booking_id}/status", response_model=BookingMutationResponse)
async def update_booking_status(
    booking_id: str,
    data: StatusUpdateRequest,
    caller: Caller = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.update_status(
        caller.uid, caller.role, parse_int_id(booking_id), data.status, data.reason, data.notes
    )
    return BookingMutationResponse(
        message="Booking status updated successfully",
        booking=BookingResponse.model_validate(booking),
    )


# ============================================================================
# USERS & STAFF
# ============================================================================


@router.get("/users", response_model=ProfileListResponse)
async def get_users(
    role: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    caller: Caller = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    profiles, total = service.search_profiles(caller.role, role, search, page, limit)
    return ProfileListResponse(
        users=[ProfileResponse.model_validate(p) for p in profiles],
        total=total,
        page=page,
        limit=limit,
        totalPages=_total_pages(total, limit),
    )


@router.get("/users/{user_id}", response_model=UserDetailResponse)
async def get_user_detail(
    user_id: str,
    caller: Caller = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    profile, bookings = service.get_user_detail(caller.role, user_id)
    return UserDetailResponse(
        user=ProfileResponse.model_validate(profile),
        bookings=[BookingResponse.model_validate(b) for b in bookings],
    )


@router.get("/admins", response_model=list[ProfileResponse])
async def get_admins(
    caller: Caller = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    return [ProfileResponse.model_validate(p) for p in service.list_staff(caller.role)]


@router.post("/admins", response_model=StaffCreatedResponse, status_code=201)
async def create_admin(
    data: StaffCreate,
    caller: Caller = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service),
):
    profile = service.create_staff(caller.role, data)
    return StaffCreatedResponse(
        message="Admin account created successfully",
        admin=ProfileResponse.model_validate(profile),
    )
