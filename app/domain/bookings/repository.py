"""Booking repository - Database operations for bookings"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Booking, Profile


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.user))
            .filter(Booking.id == booking_id)
            .first()
        )

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def save(db: Session, booking: Booking) -> Booking:
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_user_bookings(db: Session, user_id: str) -> list[Booking]:
        """Bookings owned by a user, soft-deleted ones excluded"""
        return (
            db.query(Booking)
            .options(joinedload(Booking.user))
            .filter(Booking.user_id == user_id, Booking.deleted_at.is_(None))
            .order_by(Booking.event_date.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def search_bookings(
        db: Session,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Booking], int]:
        """Filter and paginate all bookings. Returns (page, total)"""
        query = db.query(Booking)

        if status:
            query = query.filter(Booking.status == status)
        if event_type:
            query = query.filter(Booking.event_type == event_type)
        if start_date:
            query = query.filter(Booking.event_date >= start_date)
        if end_date:
            query = query.filter(Booking.event_date <= end_date)

        total = query.count()
        bookings = (
            query.options(joinedload(Booking.user))
            .order_by(Booking.event_date.desc(), Booking.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return bookings, total

    @staticmethod
    def get_status_counts(db: Session) -> dict[str, int]:
        rows = db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        return {status: count for status, count in rows}

    @staticmethod
    def get_profile(db: Session, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == user_id).first()

    @staticmethod
    def create_profile(db: Session, **profile_data) -> Profile:
        profile = Profile(**profile_data)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
