"""Booking access rules.

Each ``check_*`` function decides a single operation from the caller's id and
role plus the state of the booking involved, and raises the matching
``StudioError`` when the caller may not proceed. Nothing here touches the
database or the request, so the rules can be exercised directly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ...config import BOOKING_EDIT_WINDOW_MINUTES
from ...schemas import BookingStatus, Role
from ...shared.errors import (
    AuthorizationError,
    ConflictError,
    StatusLockError,
    TimeWindowError,
    ValidationError,
)

STAFF_ROLES = frozenset({Role.ADMIN, Role.PHOTOGRAPHER})

# Owners may edit or delete their booking only this long after creating it
EDIT_WINDOW = timedelta(minutes=BOOKING_EDIT_WINDOW_MINUTES)

# Statuses in which the owner can no longer edit (deletion is still allowed)
OWNER_EDIT_LOCKED = frozenset({BookingStatus.CONFIRMED, BookingStatus.COMPLETED})

# "deleted" is only reachable through soft delete
STATUS_UPDATE_TARGETS = frozenset(
    {
        BookingStatus.PENDING,
        BookingStatus.CONFIRMED,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.COULD_NOT_DO,
    }
)


@dataclass(frozen=True)
class BookingState:
    """The parts of a booking row the access rules look at."""

    owner_id: str
    status: BookingStatus
    created_at: datetime
    deleted_at: Optional[datetime] = None

    @classmethod
    def of(cls, booking) -> "BookingState":
        return cls(
            owner_id=booking.user_id,
            status=BookingStatus(booking.status),
            created_at=booking.created_at,
            deleted_at=booking.deleted_at,
        )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


def is_staff(role: Role) -> bool:
    return role in STAFF_ROLES


def within_edit_window(created_at: datetime, now: datetime, window: timedelta = EDIT_WINDOW) -> bool:
    return now - created_at < window


def check_staff(caller_role: Role) -> None:
    if not is_staff(caller_role):
        raise AuthorizationError("Access denied")


def check_admin(caller_role: Role) -> None:
    if caller_role != Role.ADMIN:
        raise AuthorizationError("Admin access required")


def check_list_for_user(caller_id: str, caller_role: Role, target_user_id: str) -> None:
    if caller_id != target_user_id:
        check_staff(caller_role)


def check_view(caller_id: str, caller_role: Role, owner_id: str) -> None:
    if caller_id != owner_id:
        check_staff(caller_role)


def check_status_update(caller_role: Role, new_status: Optional[str]) -> BookingStatus:
    """Staff only, and only towards one of the five non-deleted statuses.

    Any current status may move to any target.
    """
    check_staff(caller_role)
    try:
        status = BookingStatus(new_status)
    except ValueError:
        raise ValidationError("Invalid status") from None
    if status not in STATUS_UPDATE_TARGETS:
        raise ValidationError("Invalid status")
    return status


def check_edit(caller_id: str, caller_role: Role, booking: BookingState, now: datetime) -> None:
    """Owner within the window and before confirmation; admin always.

    Photographers get no edit rights from their role.
    """
    if caller_role == Role.ADMIN:
        return
    if caller_id != booking.owner_id:
        raise AuthorizationError("Access denied")
    if not within_edit_window(booking.created_at, now):
        raise TimeWindowError("Bookings can only be edited within 1 hour of creation")
    if booking.status in OWNER_EDIT_LOCKED:
        raise StatusLockError(
            f"Bookings that are {booking.status.value} can no longer be edited"
        )


def check_soft_delete(caller_id: str, caller_role: Role, booking: BookingState, now: datetime) -> None:
    """Owner within the window (any status) or admin; never twice."""
    if booking.is_deleted:
        raise ConflictError("Booking has already been deleted")
    if caller_role == Role.ADMIN:
        return
    if caller_id != booking.owner_id:
        raise AuthorizationError("Access denied")
    if not within_edit_window(booking.created_at, now):
        raise TimeWindowError("Bookings can only be deleted within 1 hour of creation")


def check_deletion_reason(reason: Optional[str]) -> str:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError("Deletion reason is required")
    return cleaned


def check_select_photo(caller_id: str, booking_owner_id: str) -> None:
    """Only the client who owns the booking picks photos; staff cannot select for them."""
    if caller_id != booking_owner_id:
        raise AuthorizationError("Access denied")
