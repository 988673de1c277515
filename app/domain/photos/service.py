"""Photo service - uploads, client photo selection and removal"""

import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import MAX_UPLOAD_FILES, MAX_UPLOAD_SIZE
from ...models import Photo
from ...schemas import Role
from ...shared.clock import Clock, utcnow
from ...shared.errors import CapacityError, NotFoundError, StoreError, ValidationError
from ..bookings import policy
from ..bookings.repository import BookingRepository
from ..settings.repository import (
    DEFAULT_MAX_PHOTO_SELECTIONS,
    MAX_PHOTO_SELECTIONS,
    SettingsRepository,
)
from .repository import PhotoRepository
from .schemas import PhotoResponse
from .storage import PhotoStorage

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}


@dataclass
class UploadItem:
    """One file of a multipart upload, already read into memory"""

    filename: str
    content_type: str
    data: bytes


class PhotoService:
    """Service layer for photo business logic"""

    def __init__(self, db: Session, storage: PhotoStorage, clock: Clock = utcnow):
        self.db = db
        self.storage = storage
        self.clock = clock
        self.repo = PhotoRepository()
        self.bookings = BookingRepository()

    def _load_booking(self, booking_id: int):
        booking = self.bookings.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        return booking

    def _load_photo(self, photo_id: int) -> Photo:
        photo = self.repo.get_photo(self.db, photo_id)
        if not photo:
            raise NotFoundError("Photo not found")
        return photo

    @staticmethod
    def _validate_uploads(items: list[UploadItem]) -> None:
        if not items:
            raise ValidationError("No files uploaded")
        if len(items) > MAX_UPLOAD_FILES:
            raise ValidationError(f"A maximum of {MAX_UPLOAD_FILES} files can be uploaded at once")
        for item in items:
            extension = os.path.splitext(item.filename or "")[1].lower()
            if item.content_type not in ALLOWED_IMAGE_TYPES or extension not in ALLOWED_EXTENSIONS:
                raise ValidationError("Only image files are allowed")
            if len(item.data) > MAX_UPLOAD_SIZE:
                raise ValidationError(
                    f"{item.filename} exceeds the {MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit"
                )

    def upload_photos(
        self, caller_id: str, caller_role: Role, booking_id: int, items: list[UploadItem]
    ) -> list[Photo]:
        """Store each file and record it; files that fail are skipped.

        Raises StoreError only when no file could be stored.
        """
        policy.check_staff(caller_role)
        self._load_booking(booking_id)
        self._validate_uploads(items)

        uploaded = []
        for item in items:
            extension = os.path.splitext(item.filename)[1].lower()
            key = f"bookings/{booking_id}/{uuid.uuid4().hex}{extension}"
            try:
                self.storage.put(key, item.data, item.content_type)
                photo = self.repo.create_photo(
                    self.db,
                    booking_id=booking_id,
                    filename=os.path.basename(key),
                    original_name=item.filename,
                    file_path=key,
                    file_url=self.storage.public_url(key),
                    file_size=len(item.data),
                    mime_type=item.content_type,
                    uploaded_by=caller_id,
                    upload_date=self.clock(),
                )
                uploaded.append(photo)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"❌ Failed to record {item.filename} for booking {booking_id}: {e}")
            except Exception as e:
                logger.error(f"❌ Failed to store {item.filename} for booking {booking_id}: {e}")

        if not uploaded:
            raise StoreError("Failed to upload photos")

        logger.info(f"📸 {len(uploaded)}/{len(items)} photos uploaded to booking {booking_id}")
        return uploaded

    def list_booking_photos(
        self, caller_id: str, caller_role: Role, booking_id: int
    ) -> list[PhotoResponse]:
        booking = self._load_booking(booking_id)
        policy.check_view(caller_id, caller_role, booking.user_id)

        photos = []
        for photo, selection in self.repo.get_booking_photos_with_selection(
            self.db, booking_id, caller_id
        ):
            response = PhotoResponse.model_validate(photo)
            if selection:
                response.selection_id = selection.id
                response.selected_at = selection.selected_at
                response.notes = selection.notes
            photos.append(response)
        return photos

    def toggle_selection(self, caller_id: str, photo_id: int, notes: Optional[str] = "") -> bool:
        """Select the photo if it is not selected, otherwise deselect it.

        Returns the new state. Selecting is capped per booking by the
        ``max_photo_selections`` setting; deselecting never is.
        """
        photo = self._load_photo(photo_id)
        booking = photo.booking
        policy.check_select_photo(caller_id, booking.user_id)

        existing = self.repo.get_selection(self.db, photo_id, caller_id)
        if existing:
            self.repo.delete_selection(self.db, existing)
            logger.info(f"➖ {caller_id} deselected photo {photo_id}")
            return False

        max_selections = SettingsRepository.get_int(
            self.db, MAX_PHOTO_SELECTIONS, DEFAULT_MAX_PHOTO_SELECTIONS
        )
        # Count then insert; concurrent selects can briefly overshoot the cap
        current = self.repo.count_selections(self.db, caller_id, booking.id)
        if current >= max_selections:
            raise CapacityError(f"Maximum {max_selections} photos can be selected")

        self.repo.create_selection(
            self.db,
            photo_id=photo_id,
            user_id=caller_id,
            booking_id=booking.id,
            notes=notes or "",
            selected_at=self.clock(),
        )
        logger.info(f"➕ {caller_id} selected photo {photo_id} ({current + 1}/{max_selections})")
        return True

    def list_selections(
        self, caller_id: str, caller_role: Role, booking_id: int
    ) -> list[PhotoResponse]:
        """The caller's own selections for a booking"""
        booking = self._load_booking(booking_id)
        policy.check_view(caller_id, caller_role, booking.user_id)

        selections = []
        for photo, selection in self.repo.get_user_selections(self.db, booking_id, caller_id):
            response = PhotoResponse.model_validate(photo)
            response.selection_id = selection.id
            response.selected_at = selection.selected_at
            response.notes = selection.notes
            selections.append(response)
        return selections

    def delete_photo(self, caller_role: Role, photo_id: int) -> None:
        policy.check_staff(caller_role)
        photo = self._load_photo(photo_id)
        key = photo.file_path

        self.repo.delete_photo(self.db, photo)
        try:
            self.storage.delete(key)
        except Exception as e:
            logger.error(f"❌ Failed to remove {key} from storage: {e}")
        logger.info(f"🗑️ Photo {photo_id} deleted")
