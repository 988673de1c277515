from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.auth import Identity, get_current_identity
from app.database import Base, create_session_factory
from app.domain.photos.storage import PhotoStorage
from app.main import create_app
from app.models import Booking, Photo, Profile

NOW = datetime(2024, 6, 1, 12, 0, 0)


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeStorage(PhotoStorage):
    def __init__(self):
        self.objects = {}
        self.fail_keys = set()

    def put(self, key: str, data: bytes, content_type: str) -> None:
        if any(key.endswith(suffix) for suffix in self.fail_keys):
            raise RuntimeError("bucket unavailable")
        self.objects[key] = data

    def delete(self, key: str) -> None:
        self.objects.pop(key, None)

    def public_url(self, key: str) -> str:
        return f"https://photos.test/{key}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_factory():
    factory = create_session_factory("sqlite://")
    engine = factory.kw["bind"]
    Base.metadata.create_all(bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def app(session_factory, storage, clock):
    return create_app(
        session_factory=session_factory,
        photo_storage=storage,
        start_scheduler=False,
        clock=clock,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def act_as(app):
    """Make every following request come from ``uid``"""

    def _act_as(uid: str, email: str = None):
        identity = Identity(uid=uid, email=email or f"{uid}@example.com")
        app.dependency_overrides[get_current_identity] = lambda: identity

    yield _act_as
    app.dependency_overrides.clear()


@pytest.fixture
def users(db):
    """alice and bob are clients, pat is a photographer, ada is an admin"""
    profiles = {
        "alice": "client",
        "bob": "client",
        "pat": "photographer",
        "ada": "admin",
    }
    for uid, role in profiles.items():
        db.add(Profile(id=uid, email=f"{uid}@example.com", display_name=uid.title(), role=role))
    db.commit()
    return profiles


def make_booking(db, user_id: str = "alice", created_at: datetime = NOW, **overrides) -> Booking:
    fields = dict(
        user_id=user_id,
        event_type="wedding",
        package_type="premium",
        event_date=date(2024, 9, 14),
        location="Old Mill",
        status="pending",
        total_amount=2500.0,
        created_at=created_at,
        updated_at=created_at,
    )
    fields.update(overrides)
    booking = Booking(**fields)
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def make_photos(db, booking_id: int, count: int) -> list[Photo]:
    photos = [
        Photo(
            booking_id=booking_id,
            filename=f"photo_{i}.jpg",
            original_name=f"IMG_{i:04d}.jpg",
            file_path=f"bookings/{booking_id}/photo_{i}.jpg",
            file_url=f"https://photos.test/bookings/{booking_id}/photo_{i}.jpg",
            file_size=1024,
            mime_type="image/jpeg",
            uploaded_by="pat",
            upload_date=NOW,
        )
        for i in range(count)
    ]
    db.add_all(photos)
    db.commit()
    for photo in photos:
        db.refresh(photo)
    return photos
