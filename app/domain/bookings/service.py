"""Booking service - Business logic for the booking lifecycle"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Booking
from ...schemas import BookingStatus, Role
from ...shared.clock import Clock, utcnow
from ...shared.errors import NotFoundError
from ...shared.validators import display_name_from_email
from . import policy
from .policy import BookingState
from .repository import BookingRepository
from .schemas import BookingCreate, BookingUpdate

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.repo = BookingRepository()

    def _load(self, booking_id: int) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def ensure_profile(self, user_id: str, email: Optional[str]) -> None:
        """Create a minimal client profile for a first-time booker.

        A failure is logged and swallowed; the profile may already have been
        created concurrently (e.g. by a signup hook).
        """
        if self.repo.get_profile(self.db, user_id):
            return
        try:
            self.repo.create_profile(
                self.db,
                id=user_id,
                email=email or "",
                display_name=display_name_from_email(email),
                role=Role.CLIENT.value,
            )
            logger.info(f"🆕 Created profile for {user_id} on first booking")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Could not create profile for {user_id}: {e}")

    def create_booking(self, caller_id: str, caller_email: Optional[str], data: BookingCreate) -> Booking:
        self.ensure_profile(caller_id, caller_email)

        now = self.clock()
        booking = self.repo.create_booking(
            self.db,
            user_id=caller_id,
            status=BookingStatus.PENDING.value,
            created_at=now,
            updated_at=now,
            **data.to_columns(),
        )
        logger.info(f"📥 Booking {booking.id} created by {caller_id} (total={booking.total_amount})")
        return booking

    def list_for_user(self, caller_id: str, target_user_id: str, caller_role: Role) -> list[Booking]:
        policy.check_list_for_user(caller_id, caller_role, target_user_id)
        return self.repo.get_user_bookings(self.db, target_user_id)

    def list_all(
        self,
        caller_role: Role,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """Staff listing with equality filters"""
        policy.check_staff(caller_role)
        return self.repo.search_bookings(
            self.db, status=status, event_type=event_type, offset=(page - 1) * limit, limit=limit
        )

    def admin_list(
        self,
        caller_role: Role,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Booking], int]:
        """Back-office listing; adds an inclusive event date range"""
        policy.check_admin(caller_role)
        return self.repo.search_bookings(
            self.db,
            status=status,
            event_type=event_type,
            start_date=start_date,
            end_date=end_date,
            offset=(page - 1) * limit,
            limit=limit,
        )

    def get_booking(self, caller_id: str, caller_role: Role, booking_id: int) -> Booking:
        booking = self._load(booking_id)
        policy.check_view(caller_id, caller_role, booking.user_id)
        return booking

    def admin_get(self, caller_role: Role, booking_id: int) -> Booking:
        policy.check_admin(caller_role)
        return self._load(booking_id)

    def update_status(
        self,
        caller_id: str,
        caller_role: Role,
        booking_id: int,
        new_status: Optional[str],
        reason: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Booking:
        status = policy.check_status_update(caller_role, new_status)
        booking = self._load(booking_id)

        previous = booking.status
        now = self.clock()
        booking.status = status.value
        booking.status_updated_at = now
        booking.status_updated_by = caller_id
        booking.updated_at = now
        if status != BookingStatus.COULD_NOT_DO:
            booking.status_reason = None
        elif reason:
            booking.status_reason = reason
        if notes:
            booking.status_notes = notes

        booking = self.repo.save(self.db, booking)
        logger.info(f"✅ Booking {booking_id} status {previous} → {status.value} by {caller_id}")
        return booking

    def edit_booking(
        self, caller_id: str, caller_role: Role, booking_id: int, data: BookingUpdate
    ) -> Booking:
        booking = self._load(booking_id)
        now = self.clock()
        policy.check_edit(caller_id, caller_role, BookingState.of(booking), now)

        updates = data.to_columns()
        for column, value in updates.items():
            setattr(booking, column, value)
        booking.updated_at = now

        booking = self.repo.save(self.db, booking)
        logger.info(f"✏️ Booking {booking_id} edited by {caller_id}: {sorted(updates)}")
        return booking

    def soft_delete(
        self, caller_id: str, caller_role: Role, booking_id: int, deletion_reason: Optional[str]
    ) -> None:
        reason = policy.check_deletion_reason(deletion_reason)
        booking = self._load(booking_id)
        now = self.clock()
        policy.check_soft_delete(caller_id, caller_role, BookingState.of(booking), now)

        booking.status = BookingStatus.DELETED.value
        booking.deleted_at = now
        booking.deletion_reason = reason
        booking.deleted_by = caller_id
        booking.updated_at = now
        self.repo.save(self.db, booking)
        logger.info(f"🗑️ Booking {booking_id} soft-deleted by {caller_id}")

    def get_stats(self, caller_role: Role) -> dict:
        policy.check_admin(caller_role)
        counts = self.repo.get_status_counts(self.db)
        stats = {status.value: counts.get(status.value, 0) for status in BookingStatus}
        stats["total"] = sum(counts.values())
        return stats
