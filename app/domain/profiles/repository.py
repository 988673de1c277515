"""Profile repository - Database operations for user profiles"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Booking, Profile


class ProfileRepository:
    """Repository for profile database operations"""

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

    @staticmethod
    def update_profile(db: Session, profile: Profile, **updates) -> Profile:
        for key, value in updates.items():
            if value is not None and hasattr(profile, key):
                setattr(profile, key, value)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def get_all_profiles(db: Session) -> list[Profile]:
        return db.query(Profile).order_by(Profile.created_at.desc()).all()

    @staticmethod
    def search_profiles(
        db: Session,
        role: Optional[str] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Profile], int]:
        query = db.query(Profile)

        if role:
            query = query.filter(Profile.role == role)
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                or_(Profile.display_name.ilike(search_term), Profile.email.ilike(search_term))
            )

        total = query.count()
        profiles = query.order_by(Profile.created_at.desc()).offset(offset).limit(limit).all()
        return profiles, total

    @staticmethod
    def get_staff_profiles(db: Session) -> list[Profile]:
        return (
            db.query(Profile)
            .filter(Profile.role.in_(["admin", "photographer"]))
            .order_by(Profile.created_at.desc())
            .all()
        )

    @staticmethod
    def get_bookings_for_user(db: Session, user_id: str) -> list[Booking]:
        """Every booking of a user, soft-deleted included (admin view)"""
        return (
            db.query(Booking)
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
            .all()
        )
