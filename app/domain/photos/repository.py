"""Photo repository - Database operations for photos and selections"""

from typing import Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session, joinedload

from ...models import Photo, PhotoSelection


class PhotoRepository:
    """Repository for photo and photo selection database operations"""

    @staticmethod
    def get_photo(db: Session, photo_id: int) -> Optional[Photo]:
        return (
            db.query(Photo)
            .options(joinedload(Photo.booking))
            .filter(Photo.id == photo_id)
            .first()
        )

    @staticmethod
    def create_photo(db: Session, **photo_data) -> Photo:
        photo = Photo(**photo_data)
        db.add(photo)
        db.commit()
        db.refresh(photo)
        return photo

    @staticmethod
    def delete_photo(db: Session, photo: Photo) -> None:
        """Hard delete; selections go with it"""
        db.delete(photo)
        db.commit()

    @staticmethod
    def get_booking_photos_with_selection(
        db: Session, booking_id: int, user_id: str
    ) -> list[tuple[Photo, Optional[PhotoSelection]]]:
        return (
            db.query(Photo, PhotoSelection)
            .outerjoin(
                PhotoSelection,
                and_(PhotoSelection.photo_id == Photo.id, PhotoSelection.user_id == user_id),
            )
            .filter(Photo.booking_id == booking_id)
            .order_by(Photo.upload_date.desc(), Photo.id.desc())
            .all()
        )

    @staticmethod
    def get_selection(db: Session, photo_id: int, user_id: str) -> Optional[PhotoSelection]:
        return (
            db.query(PhotoSelection)
            .filter(PhotoSelection.photo_id == photo_id, PhotoSelection.user_id == user_id)
            .first()
        )

    @staticmethod
    def count_selections(db: Session, user_id: str, booking_id: int) -> int:
        return (
            db.query(func.count(PhotoSelection.id))
            .filter(PhotoSelection.user_id == user_id, PhotoSelection.booking_id == booking_id)
            .scalar()
        )

    @staticmethod
    def create_selection(db: Session, **selection_data) -> PhotoSelection:
        selection = PhotoSelection(**selection_data)
        db.add(selection)
        db.commit()
        db.refresh(selection)
        return selection

    @staticmethod
    def delete_selection(db: Session, selection: PhotoSelection) -> None:
        db.delete(selection)
        db.commit()

    @staticmethod
    def get_user_selections(
        db: Session, booking_id: int, user_id: str
    ) -> list[tuple[Photo, PhotoSelection]]:
        return (
            db.query(Photo, PhotoSelection)
            .join(PhotoSelection, PhotoSelection.photo_id == Photo.id)
            .filter(PhotoSelection.booking_id == booking_id, PhotoSelection.user_id == user_id)
            .order_by(PhotoSelection.selected_at.desc(), PhotoSelection.id.desc())
            .all()
        )
