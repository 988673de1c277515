from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Firebase UID of the account; stable across sessions
    id = Column(String(128), primary_key=True, index=True)
    email = Column(String(255), index=True, nullable=False)
    display_name = Column(String(255), nullable=True)
    role = Column(String(20), default="client", nullable=False)  # client, photographer, admin
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    bookings = relationship(
        "Booking",
        back_populates="user",
        foreign_keys="Booking.user_id",
        order_by="Booking.event_date.desc()",
    )


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), ForeignKey("profiles.id"), index=True, nullable=False)
    event_type = Column(String(100), nullable=False)
    package_type = Column(String(100), nullable=False)
    event_date = Column(Date, index=True, nullable=False)
    event_time = Column(String(20), nullable=True)
    location = Column(String(500), nullable=True)
    duration = Column(Float, nullable=True)  # hours
    guest_count = Column(Integer, nullable=True)
    additional_services = Column(JSON, default=list, nullable=True)  # addon slugs
    special_requests = Column(Text, nullable=True)
    budget_range = Column(String(100), nullable=True)
    total_amount = Column(Float, nullable=True)  # as submitted by the client
    # pending, confirmed, completed, cancelled, could_not_do, deleted
    status = Column(String(20), default="pending", index=True, nullable=False)
    status_reason = Column(String(255), nullable=True)  # only shown for could_not_do
    status_notes = Column(Text, nullable=True)
    status_updated_at = Column(DateTime, nullable=True)
    status_updated_by = Column(String(128), ForeignKey("profiles.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    # Soft deletion
    deleted_at = Column(DateTime, nullable=True)
    deletion_reason = Column(Text, nullable=True)
    deleted_by = Column(String(128), ForeignKey("profiles.id"), nullable=True)

    user = relationship("Profile", back_populates="bookings", foreign_keys=[user_id])
    status_updater = relationship("Profile", foreign_keys=[status_updated_by])
    deleter = relationship("Profile", foreign_keys=[deleted_by])
    photos = relationship("Photo", back_populates="booking")


class Photo(Base):
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(
        Integer, ForeignKey("bookings.id", ondelete="CASCADE"), index=True, nullable=False
    )
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=True)
    file_path = Column(String(500), nullable=False)  # object storage key
    file_url = Column(String(1000), nullable=True)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)
    uploaded_by = Column(String(128), ForeignKey("profiles.id"), nullable=True)
    upload_date = Column(DateTime, server_default=func.now())

    booking = relationship("Booking", back_populates="photos")
    selections = relationship(
        "PhotoSelection",
        back_populates="photo",
        cascade="all, delete-orphan",
    )


class PhotoSelection(Base):
    __tablename__ = "photo_selections"
    __table_args__ = (UniqueConstraint("photo_id", "user_id", name="uq_photo_selection_user"),)

    id = Column(Integer, primary_key=True, index=True)
    photo_id = Column(
        Integer, ForeignKey("photos.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id = Column(String(128), ForeignKey("profiles.id"), index=True, nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id"), index=True, nullable=False)
    notes = Column(Text, nullable=True)
    selected_at = Column(DateTime, server_default=func.now())

    photo = relationship("Photo", back_populates="selections")
    booking = relationship("Booking")
    user = relationship("Profile")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), index=True, nullable=True)
    user_id = Column(String(128), ForeignKey("profiles.id"), index=True, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    stripe_payment_intent_id = Column(String(255), nullable=True)
    payment_method = Column(String(50), nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, succeeded, failed, cancelled
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("Profile")


class PricingItem(Base):
    __tablename__ = "pricing"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    category = Column(String(20), nullable=False)  # package, addon
    price = Column(Float, nullable=False)
    duration = Column(String(50), nullable=True)  # packages only, e.g. "6 hours"
    features = Column(JSON, nullable=True)  # ordered list of strings
    display_order = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    updated_by = Column(String(128), nullable=True)


class Setting(Base):
    __tablename__ = "settings"

    setting_key = Column(String(100), primary_key=True)
    setting_value = Column(Text, nullable=True)
