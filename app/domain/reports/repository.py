"""Report repository - read-only queries feeding the Excel exports"""

from datetime import date
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ...models import Booking, Payment, Photo, PhotoSelection, Profile


def _event_date_filters(start_date: Optional[date], end_date: Optional[date]) -> list:
    filters = []
    if start_date:
        filters.append(Booking.event_date >= start_date)
    if end_date:
        filters.append(Booking.event_date <= end_date)
    return filters


class ReportRepository:
    """Repository for reporting queries"""

    @staticmethod
    def get_bookings_with_selection_counts(
        db: Session, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[tuple[Booking, Profile, int]]:
        """Every booking (soft-deleted included) with its owner and selected photo count"""
        return (
            db.query(Booking, Profile, func.count(PhotoSelection.id))
            .join(Profile, Booking.user_id == Profile.id)
            .outerjoin(PhotoSelection, PhotoSelection.booking_id == Booking.id)
            .filter(*_event_date_filters(start_date, end_date))
            .group_by(Booking.id, Profile.id)
            .order_by(Booking.event_date.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_selections(
        db: Session, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[tuple[PhotoSelection, Photo, Booking, Profile]]:
        return (
            db.query(PhotoSelection, Photo, Booking, Profile)
            .join(Photo, PhotoSelection.photo_id == Photo.id)
            .join(Booking, PhotoSelection.booking_id == Booking.id)
            .join(Profile, PhotoSelection.user_id == Profile.id)
            .filter(*_event_date_filters(start_date, end_date))
            .order_by(PhotoSelection.selected_at.desc(), PhotoSelection.id.desc())
            .all()
        )

    @staticmethod
    def get_payments(db: Session) -> list[tuple[Payment, Profile]]:
        return (
            db.query(Payment, Profile)
            .join(Profile, Payment.user_id == Profile.id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )

    @staticmethod
    def get_booking_stats(db: Session) -> dict:
        def count_status(status: str):
            return func.count(case((Booking.status == status, 1)))

        row = db.query(
            func.count(Booking.id),
            count_status("pending"),
            count_status("confirmed"),
            count_status("completed"),
            count_status("cancelled"),
        ).one()
        return {
            "total_bookings": row[0],
            "pending_bookings": row[1],
            "confirmed_bookings": row[2],
            "completed_bookings": row[3],
            "cancelled_bookings": row[4],
        }

    @staticmethod
    def get_photo_stats(db: Session) -> dict:
        return {"total_photos": db.query(func.count(Photo.id)).scalar()}

    @staticmethod
    def get_selection_stats(db: Session) -> dict:
        total, clients = db.query(
            func.count(PhotoSelection.id), func.count(func.distinct(PhotoSelection.user_id))
        ).one()
        return {"total_selections": total, "clients_with_selections": clients}

    @staticmethod
    def get_revenue_stats(db: Session) -> dict:
        total_revenue, total_payments, successful = db.query(
            func.sum(Payment.amount),
            func.count(Payment.id),
            func.count(case((Payment.status == "succeeded", 1))),
        ).one()
        return {
            "total_revenue": total_revenue or 0,
            "total_payments": total_payments,
            "successful_payments": successful,
        }
